from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from explorer.models.filters import Facet, FilterState, InvalidFacetError, SetScalar, ToggleFacet, parse_facet
from explorer.services.facets import options_for, search_ethnicity_groups
from explorer.services.sessions import session_registry

router = APIRouter(prefix="/{namespace}/filters", tags=["filters"])


class ValuePayload(BaseModel):
    value: Any = None


class ToggleRequest(BaseModel):
    facet: Facet
    value: str


def _facet_or_400(name: str) -> Facet:
    try:
        return parse_facet(name)
    except InvalidFacetError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=FilterState)
async def get_filters(namespace: str) -> FilterState:
    return await session_registry.get(namespace).store.load()


@router.post("/toggle", response_model=FilterState)
async def toggle_facet(namespace: str, payload: ToggleRequest) -> FilterState:
    session = session_registry.get(namespace)
    try:
        return await session.dispatch(ToggleFacet(facet=payload.facet, value=payload.value))
    except InvalidFacetError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{facet}", response_model=FilterState)
async def set_facet(namespace: str, facet: str, payload: ValuePayload) -> FilterState:
    """Replace one facet. Multi-select facets accept a list of values."""
    target = _facet_or_400(facet)
    session = session_registry.get(namespace)
    try:
        if target.is_multi_select:
            await session.store.set(target, payload.value)
            return session.store.snapshot()
        return await session.dispatch(SetScalar(facet=target, value=payload.value))
    except InvalidFacetError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("", response_model=FilterState)
async def reset_filters(namespace: str) -> FilterState:
    return await session_registry.get(namespace).reset()


@router.get("/options/{facet}")
async def facet_options(namespace: str, facet: str, q: str | None = None) -> dict[str, Any]:
    """
    Option list for a facet menu, narrowed by q or, when q is omitted,
    by the persisted facet search text.
    """
    target = _facet_or_400(facet)
    if q is None:
        q = await session_registry.get(namespace).store.get(Facet.FACET_SEARCH_QUERY)

    try:
        options = options_for(target, q)
    except InvalidFacetError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result: dict[str, Any] = {"facet": target.value, "query": q, "options": options}
    if target == Facet.ETHNICITIES:
        result["groups"] = search_ethnicity_groups(q)
    return result
