import asyncio
import json
from collections.abc import Callable
from typing import Any, Protocol

from loguru import logger

from explorer.core.config import settings
from explorer.core.constants import DEFAULT_NAMESPACE, FACET_STORAGE_KEYS
from explorer.models.filters import (
    Facet,
    FilterCommand,
    FilterState,
    InvalidFacetError,
    ResetFilters,
    SetScalar,
    ToggleFacet,
    encode_facet_value,
    facet_default,
    parse_facet,
    validate_facet_value,
)
from explorer.services.redis_service import redis_service

# Called with the facet that changed (None after a reset) and the new full state
FilterListener = Callable[[Facet | None, FilterState], None]


class FacetStorage(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: Any) -> bool: ...


class FilterStore:
    """
    Typed, independently persisted access to every explore facet.

    Each facet is stored under its own key so a corrupt or legacy payload only
    resets that one facet. The in-memory value is authoritative for the session;
    persistence is best effort.
    """

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        storage: FacetStorage | None = None,
        key_prefix: str | None = None,
    ):
        self.namespace = namespace
        self.storage = storage if storage is not None else redis_service
        self.key_prefix = settings.FILTER_KEY_PREFIX if key_prefix is None else key_prefix
        self._values: dict[Facet, Any] = {}
        self._listeners: list[FilterListener] = []

    def storage_key(self, facet: Facet) -> str:
        return f"{self.key_prefix}{self.namespace}:{FACET_STORAGE_KEYS[facet.value]}"

    @property
    def is_loaded(self) -> bool:
        return len(self._values) == len(Facet)

    # Reads

    async def get(self, facet: Facet | str) -> Any:
        """Current value of a facet, reading the persisted payload on first access."""
        facet = parse_facet(facet)
        if facet in self._values:
            return self._values[facet]
        loaded = await self._read(facet)
        # A write may have landed while the read was suspended; it wins.
        return self._values.setdefault(facet, loaded)

    async def load(self) -> FilterState:
        await asyncio.gather(*(self.get(facet) for facet in Facet))
        return self.snapshot()

    def snapshot(self) -> FilterState:
        if not self.is_loaded:
            raise RuntimeError("FilterStore.load() must complete before taking a snapshot")
        return FilterState(**{facet.value: value for facet, value in self._values.items()})

    # Mutations

    async def set(self, facet: Facet | str, value: Any) -> Any:
        """
        Validate and store a facet value, notify listeners, then persist it.

        Raises:
            InvalidFacetError: unknown facet or a value the facet cannot hold
        """
        facet = parse_facet(facet)
        validated = validate_facet_value(facet, value)
        if not self.is_loaded:
            await self.load()
        self._values[facet] = validated
        self._notify(facet)
        await self._write(facet, validated)
        return validated

    async def toggle(self, facet: Facet | str, value: str) -> frozenset[str]:
        """Add value to a multi-select facet if absent, remove it if present."""
        facet = parse_facet(facet)
        if not facet.is_multi_select:
            raise InvalidFacetError(f"{facet.value} is not a multi-select facet")
        current: frozenset[str] = await self.get(facet)
        updated = current - {value} if value in current else current | {value}
        return await self.set(facet, updated)

    async def reset_all(self) -> FilterState:
        """Restore every facet default. Defaults are persisted before this returns."""
        for facet in Facet:
            self._values[facet] = facet_default(facet)
        self._notify(None)
        await self.save()
        logger.debug(f"[{self.namespace}] Explore filters reset to defaults")
        return self.snapshot()

    async def save(self) -> None:
        await asyncio.gather(*(self._write(facet, value) for facet, value in self._values.items()))

    async def dispatch(self, command: FilterCommand) -> FilterState:
        """Apply a presentation-layer command. The store is the only mutator of filter state."""
        if isinstance(command, ToggleFacet):
            await self.toggle(command.facet, command.value)
        elif isinstance(command, SetScalar):
            if command.facet.is_multi_select:
                raise InvalidFacetError(f"{command.facet.value} is multi-select; use ToggleFacet")
            await self.set(command.facet, command.value)
        elif isinstance(command, ResetFilters):
            await self.reset_all()
        else:
            raise TypeError(f"Unsupported filter command: {command!r}")
        return self.snapshot()

    # Observers

    def subscribe(self, listener: FilterListener) -> Callable[[], None]:
        """Register a listener invoked synchronously after every mutation. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, facet: Facet | None) -> None:
        if not self._listeners:
            return
        state = self.snapshot()
        for listener in list(self._listeners):
            listener(facet, state)

    # Persistence

    async def _read(self, facet: Facet) -> Any:
        key = self.storage_key(facet)
        try:
            raw = await self.storage.get(key)
        except Exception as e:
            logger.error(f"[{self.namespace}] Failed to read '{key}': {e}")
            return facet_default(facet)

        if raw is None:
            return facet_default(facet)

        try:
            return validate_facet_value(facet, json.loads(raw))
        except (json.JSONDecodeError, TypeError, InvalidFacetError) as e:
            logger.warning(f"[{self.namespace}] Ignoring undecodable value for '{key}': {e}")
            return facet_default(facet)

    async def _write(self, facet: Facet, value: Any) -> None:
        key = self.storage_key(facet)
        try:
            stored = await self.storage.set(key, json.dumps(encode_facet_value(value)))
        except Exception as e:
            logger.error(f"[{self.namespace}] Failed to persist '{key}': {e}")
            return
        if stored is False:
            logger.warning(f"[{self.namespace}] Facet '{key}' was not persisted; keeping in-memory value")
