"""Tests for the facet option catalogs."""

import pytest

from explorer.models.filters import Facet, InvalidFacetError
from explorer.services.facets import (
    ETHNICITIES,
    ETHNICITY_GROUPS,
    PREPARATION_STANDARDS,
    options_for,
    search_ethnicity_groups,
    search_options,
)


def test_search_is_case_insensitive_substring():
    assert search_options(["Vegan", "Vegetarian", "Keto"], "VEG") == ["Vegan", "Vegetarian"]


@pytest.mark.parametrize("query", [None, "", "   "])
def test_blank_query_keeps_everything_sorted(query):
    assert search_options(["b", "a", "c"], query) == ["a", "b", "c"]


def test_preparation_catalog_carries_religious_standards():
    assert {"Halal", "Kosher"} <= set(PREPARATION_STANDARDS)


def test_ethnicity_catalog_is_union_of_groups():
    grouped = {value for options in ETHNICITY_GROUPS.values() for value in options}

    assert set(ETHNICITIES) == grouped
    assert ETHNICITIES == sorted(ETHNICITIES)


def test_group_search_drops_empty_regions():
    groups = search_ethnicity_groups("chinese")

    assert list(groups) == ["East Asia"]
    assert all("Chinese" in option for option in groups["East Asia"])


def test_options_for_catalog_facets():
    assert options_for(Facet.DIFFICULTY) == ["Easy", "Hard", "Medium"]
    assert options_for(Facet.MEAL_TYPES, "br") == ["Breakfast", "Brunch"]


@pytest.mark.parametrize("facet", [Facet.SORT_KEY, Facet.MIN_RATING, Facet.FACET_SEARCH_QUERY])
def test_options_for_rejects_facets_without_catalog(facet):
    with pytest.raises(InvalidFacetError):
        options_for(facet)
