import hashlib
import json

from pydantic import BaseModel, ConfigDict

from explorer.core.constants import MULTI_SELECT_PARAMS, QUERY_KEY_NAMESPACE
from explorer.models.filters import DEFAULT_FILTER_STATE, Difficulty, FilterState, SortKey


class QueryKey(BaseModel):
    """
    Cache partition identity for one explore request.

    Two keys are equal exactly when their filter states would produce the same
    server request. Multi-select facets are held as sorted tuples so the order a
    user picked values in never matters. View mode and the facet-menu search text
    are not part of the key.
    """

    model_config = ConfigDict(frozen=True)

    only_flagged: bool = False
    sort_key: SortKey = SortKey.NEWEST
    cuisines: tuple[str, ...] = ()
    meal_types: tuple[str, ...] = ()
    dietary: tuple[str, ...] = ()
    ethnicities: tuple[str, ...] = ()
    excluded_allergens: tuple[str, ...] = ()
    preparation_tags: tuple[str, ...] = ()
    difficulty: Difficulty = Difficulty.ANY
    max_cook_time_minutes: int = DEFAULT_FILTER_STATE.max_cook_time_minutes
    min_rating: int = 0

    @property
    def digest(self) -> str:
        """Short stable identifier, safe to log or use as a storage key."""
        canonical = json.dumps([QUERY_KEY_NAMESPACE, self.model_dump(mode="json")], sort_keys=True)
        return hashlib.sha1(canonical.encode("utf-8")).hexdigest()[:16]

    def to_filter_state(self) -> FilterState:
        return FilterState(**self.model_dump())

    def to_params(self, cursor: str | None = None, limit: int = 24) -> list[tuple[str, str]]:
        """Request parameters for the content-search endpoint. Multi-select facets repeat once per value."""
        params: list[tuple[str, str]] = [("limit", str(limit)), ("sort", self.sort_key.value)]
        if cursor:
            params.append(("cursor", cursor))
        if self.only_flagged:
            params.append(("is_recipe", "1"))
        if self.difficulty != Difficulty.ANY:
            params.append(("difficulty", self.difficulty.value))
        if self.max_cook_time_minutes != DEFAULT_FILTER_STATE.max_cook_time_minutes:
            params.append(("max_cook", str(self.max_cook_time_minutes)))
        if self.min_rating:
            params.append(("min_rating", str(self.min_rating)))

        for field, name in MULTI_SELECT_PARAMS.items():
            params.extend((name, value) for value in getattr(self, field))
        return params


def compose_query_key(state: FilterState) -> QueryKey:
    return QueryKey(
        only_flagged=state.only_flagged,
        sort_key=state.sort_key,
        cuisines=tuple(sorted(state.cuisines)),
        meal_types=tuple(sorted(state.meal_types)),
        dietary=tuple(sorted(state.dietary)),
        ethnicities=tuple(sorted(state.ethnicities)),
        excluded_allergens=tuple(sorted(state.excluded_allergens)),
        preparation_tags=tuple(sorted(state.preparation_tags)),
        difficulty=state.difficulty,
        max_cook_time_minutes=state.max_cook_time_minutes,
        min_rating=state.min_rating,
    )
