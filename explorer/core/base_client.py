import asyncio
from typing import Any

import httpx
from loguru import logger


class FetchError(Exception):
    """
    A request that failed at the transport level or returned a non-2xx status.
    detail carries the response body text, or the status line when the body is empty.
    """

    def __init__(self, detail: str, status_code: int | None = None):
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{status_code}: {detail}" if status_code is not None else detail)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "FetchError":
        text = response.text.strip()
        detail = text or f"{response.status_code} {response.reason_phrase}".strip()
        return cls(detail, status_code=response.status_code)


class BaseClient:
    """
    Base asynchronous HTTP client with optional retry logic and logging.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        max_retries: int = 1,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.headers = headers or {}
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx.AsyncClient instance."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=True,
                transport=self.transport,
            )
        return self._client

    async def close(self):
        """Close the underlying HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, url: str, max_tries: int | None = None, **kwargs) -> httpx.Response:
        """Internal request handler. Raises FetchError once every attempt has failed."""
        client = await self.get_client()
        tries = max_tries or self.max_retries
        last_error: FetchError | None = None

        for attempt in range(1, tries + 1):
            try:
                response = await client.request(method, url, **kwargs)
            except httpx.RequestError as e:
                last_error = FetchError(str(e) or e.__class__.__name__)
            else:
                if response.is_success:
                    return response
                last_error = FetchError.from_response(response)

            if attempt < tries:
                wait_time = 0.5 * (2 ** (attempt - 1))  # Exponential backoff
                logger.warning(
                    f"Request failed ({method} {url}): {last_error}. "
                    f"Retrying in {wait_time}s... (Attempt {attempt}/{tries})"
                )
                await asyncio.sleep(wait_time)
            else:
                logger.error(f"Request failed ({method} {url}) after {tries} attempt(s): {last_error}")

        raise last_error or FetchError("Request failed for unknown reasons")

    async def get(self, url: str, params: Any = None, **kwargs) -> Any:
        """Perform a GET request and return the decoded JSON body."""
        response = await self._request("GET", url, params=params, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON in response: {e}", status_code=response.status_code) from e
