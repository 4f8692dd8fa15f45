from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ContentItem(BaseModel):
    """One explore post as returned by the content-search endpoint (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str | int
    title: str | None = None
    image: str | None = None
    cuisine: str | None = None
    is_recipe: bool = Field(default=False, alias="isRecipe")
    author: str | None = None
    cook_time: float | None = Field(default=None, alias="cookTime")
    difficulty: str | None = None
    rating: float | None = None
    likes: int = Field(default=0, ge=0)
    meal_type: str | None = Field(default=None, alias="mealType")
    dietary: frozenset[str] = Field(default_factory=frozenset)
    ethnicity: frozenset[str] = Field(default_factory=frozenset)
    allergens: frozenset[str] = Field(default_factory=frozenset)
    preparation: frozenset[str] = Field(default_factory=frozenset)
    created_at: datetime | None = Field(default=None, alias="createdAt")

    @model_validator(mode="before")
    @classmethod
    def _category_as_cuisine(cls, data: Any) -> Any:
        # Some backends send the cuisine under "category"
        if isinstance(data, dict) and data.get("cuisine") is None and data.get("category") is not None:
            return {**data, "cuisine": data["category"]}
        return data

    @field_validator("dietary", "ethnicity", "allergens", "preparation", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("is_recipe", mode="before")
    @classmethod
    def _none_as_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("likes", mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


def _is_post_like(row: Any) -> bool:
    return isinstance(row, dict) and row.get("id") is not None


class Page(BaseModel):
    """
    One incremental slice of results for a query key.
    next_cursor None marks the end of the sequence.
    """

    model_config = ConfigDict(populate_by_name=True)

    items: list[ContentItem] = Field(default_factory=list)
    next_cursor: str | None = Field(default=None, alias="nextCursor")
    total: int | None = None

    @field_validator("items", mode="before")
    @classmethod
    def _drop_rows_without_id(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        return [row for row in value if isinstance(row, ContentItem) or _is_post_like(row)]

    @field_validator("next_cursor", mode="before")
    @classmethod
    def _normalize_cursor(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return str(value)
