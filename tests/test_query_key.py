"""Tests for query key composition and request parameters."""

import pytest

from explorer.models.filters import Difficulty, FilterState, SortKey, ViewMode
from explorer.services.query_key import QueryKey, compose_query_key


def test_multi_select_order_does_not_matter():
    first = FilterState(cuisines=["Thai", "Italian", "Korean"], dietary=["Vegan", "Keto"])
    second = FilterState(cuisines=["Korean", "Thai", "Italian"], dietary=["Keto", "Vegan"])

    assert compose_query_key(first) == compose_query_key(second)
    assert hash(compose_query_key(first)) == hash(compose_query_key(second))
    assert compose_query_key(first).digest == compose_query_key(second).digest


def test_presentation_only_fields_do_not_change_key():
    base = compose_query_key(FilterState())

    assert compose_query_key(FilterState(facet_search_query="veg")) == base
    assert compose_query_key(FilterState(view_mode=ViewMode.LIST)) == base


@pytest.mark.parametrize(
    "changes",
    [
        {"only_flagged": True},
        {"sort_key": SortKey.RATING},
        {"cuisines": ["Italian"]},
        {"meal_types": ["Dinner"]},
        {"dietary": ["Vegan"]},
        {"ethnicities": ["Japanese"]},
        {"excluded_allergens": ["Peanuts"]},
        {"preparation_tags": ["Halal"]},
        {"difficulty": Difficulty.EASY},
        {"max_cook_time_minutes": 30},
        {"min_rating": 4},
    ],
)
def test_every_server_facet_changes_key(changes):
    base = compose_query_key(FilterState())
    changed = compose_query_key(FilterState(**changes))

    assert changed != base
    assert changed.digest != base.digest


def test_keys_address_a_dict():
    cache = {compose_query_key(FilterState(cuisines=["A", "B"])): "pages"}

    assert cache[compose_query_key(FilterState(cuisines=["B", "A"]))] == "pages"


def test_default_params_omit_optional_filters():
    params = compose_query_key(FilterState()).to_params(limit=24)

    assert params == [("limit", "24"), ("sort", "newest")]


def test_params_repeat_multi_select_values_and_carry_cursor():
    state = FilterState(
        only_flagged=True,
        sort_key=SortKey.LIKES,
        cuisines=["Thai", "Italian"],
        meal_types=["Dinner"],
        dietary=["Vegan", "Gluten-Free"],
        ethnicities=["Japanese"],
        excluded_allergens=["Peanuts", "Soy"],
        preparation_tags=["Kosher"],
        difficulty=Difficulty.MEDIUM,
        max_cook_time_minutes=45,
        min_rating=3,
    )

    params = compose_query_key(state).to_params(cursor="abc", limit=10)

    assert params[:7] == [
        ("limit", "10"),
        ("sort", "likes"),
        ("cursor", "abc"),
        ("is_recipe", "1"),
        ("difficulty", "Medium"),
        ("max_cook", "45"),
        ("min_rating", "3"),
    ]
    assert [v for k, v in params if k == "cuisine"] == ["Italian", "Thai"]
    assert [v for k, v in params if k == "meal"] == ["Dinner"]
    assert [v for k, v in params if k == "diet"] == ["Gluten-Free", "Vegan"]
    assert [v for k, v in params if k == "ethnicity"] == ["Japanese"]
    assert [v for k, v in params if k == "exclude_allergen"] == ["Peanuts", "Soy"]
    assert [v for k, v in params if k == "preparation"] == ["Kosher"]


def test_key_round_trips_to_filter_state():
    state = FilterState(dietary=["Vegan"], min_rating=2, sort_key=SortKey.RATING)

    restored = compose_query_key(state).to_filter_state()

    assert restored == state
    assert isinstance(compose_query_key(state), QueryKey)
