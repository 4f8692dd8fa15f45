from collections.abc import Iterable

from explorer.models.content import ContentItem
from explorer.models.filters import Difficulty, FilterState, SortKey


def matches(item: ContentItem, state: FilterState) -> bool:
    """
    Decide whether one item satisfies the filter state.

    This is the normative definition the content-search endpoint must also implement.
    Per facet: cuisines, meal types and ethnicities match ANY selected value,
    dietary and preparation tags require ALL selected values, excluded allergens
    require NONE. An empty facet places no constraint.
    """
    if state.only_flagged and not item.is_recipe:
        return False

    if state.cuisines and item.cuisine not in state.cuisines:
        return False

    if state.meal_types and item.meal_type not in state.meal_types:
        return False

    if state.dietary and not state.dietary <= item.dietary:
        return False

    if state.ethnicities and not (state.ethnicities & item.ethnicity):
        return False

    if state.excluded_allergens and state.excluded_allergens & item.allergens:
        return False

    if state.preparation_tags and not state.preparation_tags <= item.preparation:
        return False

    if state.difficulty != Difficulty.ANY and item.difficulty != state.difficulty.value:
        return False

    # Items without a cook time are not excluded by the time bound
    if item.cook_time is not None and item.cook_time > state.max_cook_time_minutes:
        return False

    # Unrated items are not excluded by the rating floor
    if state.min_rating > 0 and item.rating is not None and item.rating < state.min_rating:
        return False

    return True


def _created_sort_key(item: ContentItem) -> tuple[bool, float]:
    # Missing timestamps sort after every dated item when ordering newest first
    if item.created_at is None:
        return (False, 0.0)
    return (True, item.created_at.timestamp())


def sort_items(items: Iterable[ContentItem], sort_key: SortKey) -> list[ContentItem]:
    """Descending order by the chosen key. Ties keep their input order."""
    if sort_key == SortKey.RATING:
        return sorted(items, key=lambda item: item.rating or 0.0, reverse=True)
    if sort_key == SortKey.LIKES:
        return sorted(items, key=lambda item: item.likes, reverse=True)
    return sorted(items, key=_created_sort_key, reverse=True)


def apply_filters(items: Iterable[ContentItem], state: FilterState) -> list[ContentItem]:
    """Filter an in-memory collection exactly as the remote endpoint would, then sort it."""
    return sort_items((item for item in items if matches(item, state)), state.sort_key)
