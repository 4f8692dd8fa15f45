"""Tests for the local JSON page source."""

import json

import pytest
from conftest import build_items

from explorer.core.base_client import FetchError
from explorer.models.filters import FilterState, SortKey
from explorer.services.explore.local import LocalExploreSource
from explorer.services.query_key import compose_query_key


@pytest.mark.anyio
async def test_offset_cursors_walk_the_filtered_result():
    source = LocalExploreSource(build_items(5), page_size=2)
    key = compose_query_key(FilterState(sort_key=SortKey.LIKES))

    first = await source.fetch_page(key)
    second = await source.fetch_page(key, first.next_cursor)
    last = await source.fetch_page(key, second.next_cursor)

    assert [item.id for item in first.items] == ["post-4", "post-3"]
    assert first.next_cursor == "2"
    assert [item.id for item in last.items] == ["post-0"]
    assert last.next_cursor is None
    assert first.total == 5


@pytest.mark.anyio
async def test_filters_are_applied_before_paging():
    items = build_items(4) + build_items(2, cuisine="Thai")
    source = LocalExploreSource(items, page_size=10)

    page = await source.fetch_page(compose_query_key(FilterState(cuisines=["Thai"])))

    assert page.total == 2
    assert all(item.cuisine == "Thai" for item in page.items)


@pytest.mark.anyio
@pytest.mark.parametrize("cursor", ["abc", "-3"])
async def test_bad_cursor_is_rejected(cursor):
    source = LocalExploreSource(build_items(3), page_size=2)

    with pytest.raises(FetchError) as exc_info:
        await source.fetch_page(compose_query_key(FilterState()), cursor)

    assert exc_info.value.status_code == 400


def test_from_json_file_skips_invalid_rows(tmp_path):
    path = tmp_path / "posts.json"
    path.write_text(
        json.dumps(
            [
                {"id": 1, "title": "Pho", "cookTime": 40, "isRecipe": True},
                {"title": "missing id"},
                {"id": 2, "likes": -5},
                {"id": 3, "dietary": ["Vegan"]},
            ]
        ),
        encoding="utf-8",
    )

    source = LocalExploreSource.from_json_file(path, page_size=6)

    assert [item.id for item in source.items] == [1, 3]
    assert source.items[0].cook_time == 40
    assert source.page_size == 6


def test_from_json_file_accepts_items_envelope(tmp_path):
    path = tmp_path / "posts.json"
    path.write_text(json.dumps({"items": [{"id": "a"}]}), encoding="utf-8")

    assert [item.id for item in LocalExploreSource.from_json_file(path).items] == ["a"]
