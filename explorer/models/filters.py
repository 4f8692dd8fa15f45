from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ViewMode(str, Enum):
    GRID = "grid"
    LIST = "list"


class SortKey(str, Enum):
    NEWEST = "newest"
    RATING = "rating"
    LIKES = "likes"


class Difficulty(str, Enum):
    ANY = ""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Facet(str, Enum):
    """One independently persisted dimension of the explore filters."""

    VIEW_MODE = "view_mode"
    ONLY_FLAGGED = "only_flagged"
    SORT_KEY = "sort_key"
    CUISINES = "cuisines"
    MEAL_TYPES = "meal_types"
    DIETARY = "dietary"
    ETHNICITIES = "ethnicities"
    EXCLUDED_ALLERGENS = "excluded_allergens"
    PREPARATION_TAGS = "preparation_tags"
    DIFFICULTY = "difficulty"
    MAX_COOK_TIME_MINUTES = "max_cook_time_minutes"
    MIN_RATING = "min_rating"
    FACET_SEARCH_QUERY = "facet_search_query"

    @property
    def is_multi_select(self) -> bool:
        return self in MULTI_SELECT_FACETS


MULTI_SELECT_FACETS: frozenset[Facet] = frozenset(
    {
        Facet.CUISINES,
        Facet.MEAL_TYPES,
        Facet.DIETARY,
        Facet.ETHNICITIES,
        Facet.EXCLUDED_ALLERGENS,
        Facet.PREPARATION_TAGS,
    }
)


class InvalidFacetError(ValueError):
    """Raised when a command names an unknown facet or carries a value the facet cannot hold."""


class FilterState(BaseModel):
    """
    The complete discovery intent of one user.
    Multi-select facets are frozensets: an empty set means no constraint on that facet.
    """

    model_config = ConfigDict(frozen=True)

    view_mode: ViewMode = ViewMode.GRID
    only_flagged: bool = False
    sort_key: SortKey = SortKey.NEWEST

    cuisines: frozenset[str] = Field(default_factory=frozenset)
    meal_types: frozenset[str] = Field(default_factory=frozenset)
    dietary: frozenset[str] = Field(default_factory=frozenset)
    ethnicities: frozenset[str] = Field(default_factory=frozenset)
    excluded_allergens: frozenset[str] = Field(default_factory=frozenset)
    preparation_tags: frozenset[str] = Field(default_factory=frozenset)

    difficulty: Difficulty = Difficulty.ANY
    max_cook_time_minutes: int = Field(default=60, ge=0)
    min_rating: int = Field(default=0, ge=0, le=5)

    # Narrows long option lists in the filter menus; never sent to the server
    facet_search_query: str = ""


DEFAULT_FILTER_STATE = FilterState()


def facet_default(facet: Facet) -> Any:
    return getattr(DEFAULT_FILTER_STATE, facet.value)


def validate_facet_value(facet: Facet, value: Any) -> Any:
    """
    Validate a raw value for a single facet using the FilterState field rules.

    Raises:
        InvalidFacetError: the value does not fit the facet
    """
    try:
        state = FilterState.model_validate({facet.value: value})
    except ValidationError as exc:
        raise InvalidFacetError(f"Invalid value for {facet.value}: {value!r}") from exc
    return getattr(state, facet.value)


def encode_facet_value(value: Any) -> Any:
    """JSON-ready form of a facet value. Sets are written sorted so stored payloads are stable."""
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, Enum):
        return value.value
    return value


def parse_facet(name: str | Facet) -> Facet:
    try:
        return Facet(name)
    except ValueError as exc:
        raise InvalidFacetError(f"Unknown facet: {name}") from exc


# Commands emitted by the presentation layer; the filter store is their only consumer.


class ToggleFacet(BaseModel):
    facet: Facet
    value: str


class SetScalar(BaseModel):
    facet: Facet
    value: Any = None


class ResetFilters(BaseModel):
    pass


FilterCommand = ToggleFacet | SetScalar | ResetFilters
