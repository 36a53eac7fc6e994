"""Pydantic schemas for bookmark endpoints."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.bookmark import BookmarkType
from schemas.validators import (
    UtcDatetime,
    normalize_tag_names,
    optional_id,
    strip_text,
    validate_title,
)

INVALID_TYPE_MESSAGE = (
    "Invalid bookmark type. Only link, text, image, and video bookmarks are allowed."
)


def validate_bookmark_type(value: Any) -> str:
    """Accept only the values of BookmarkType ("audio" and friends are rejected)."""
    try:
        return BookmarkType(value).value
    except ValueError:
        raise ValueError(INVALID_TYPE_MESSAGE) from None


class BookmarkCreate(BaseModel):
    """Schema for creating a new bookmark."""

    title: str = Field(default="", validate_default=True)
    url: str = ""
    type: str = BookmarkType.LINK.value
    content: str = ""
    description: str = ""
    collection_id: int | None = None
    tags: list[str] = []
    favorite: bool = False

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: Any) -> Any:
        """Trim and require a title."""
        return validate_title(v)

    @field_validator("type", mode="before")
    @classmethod
    def check_type(cls, v: Any) -> str:
        """Restrict to the supported bookmark types."""
        return validate_bookmark_type(v)

    @field_validator("url", "description", mode="before")
    @classmethod
    def strip_single_line(cls, v: Any) -> Any:
        """Trim single-line text fields; null becomes empty."""
        return strip_text(v)

    @field_validator("content", mode="before")
    @classmethod
    def default_content(cls, v: Any) -> Any:
        """Content is stored verbatim; null becomes empty."""
        return "" if v is None else v

    @field_validator("collection_id", mode="before")
    @classmethod
    def normalize_collection(cls, v: int | None) -> int | None:
        """0 means uncategorized."""
        return optional_id(v)

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v: list[str] | None) -> list[str]:
        """Null tags means no tags."""
        return v or []

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        """Trim, skip empty and de-duplicate tag names."""
        return normalize_tag_names(v)


class BookmarkUpdate(BaseModel):
    """
    Schema for a partial bookmark update.

    Only fields present in the request body are applied (see ``model_fields_set``).
    ``tags``, when given as a list, replaces the bookmark's entire tag set.
    """

    title: str | None = None
    url: str | None = None
    type: str | None = None
    content: str | None = None
    description: str | None = None
    collection_id: int | None = None
    favorite: bool | None = None
    tags: list[str] | None = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: Any) -> Any:
        """A present title must be non-empty."""
        return validate_title(v)

    @field_validator("type", mode="before")
    @classmethod
    def check_type(cls, v: Any) -> str:
        """Restrict to the supported bookmark types."""
        return validate_bookmark_type(v)

    @field_validator("url", "description", mode="before")
    @classmethod
    def strip_single_line(cls, v: Any) -> Any:
        """Trim single-line text fields; null becomes empty."""
        return strip_text(v)

    @field_validator("content", mode="before")
    @classmethod
    def default_content(cls, v: Any) -> Any:
        """Null content becomes empty."""
        return "" if v is None else v

    @field_validator("collection_id", mode="before")
    @classmethod
    def normalize_collection(cls, v: int | None) -> int | None:
        """0 / null moves the bookmark out of its collection."""
        return optional_id(v)

    @field_validator("favorite", mode="before")
    @classmethod
    def coerce_favorite(cls, v: Any) -> Any:
        """Null clears the favorite flag."""
        return False if v is None else v

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str] | None:
        """Trim, skip empty and de-duplicate tag names if provided."""
        if v is None:
            return None
        return normalize_tag_names(v)

    def field_updates(self) -> dict[str, Any]:
        """Column values explicitly present in the patch (tags excluded)."""
        return {
            field: getattr(self, field)
            for field in self.model_fields_set
            if field != "tags"
        }


class BookmarkResponse(BaseModel):
    """Bookmark with its resolved tag names and collection name."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    collection_id: int | None
    title: str
    url: str
    type: str
    content: str
    description: str
    favorite: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime
    tags: list[str] = []
    collection_name: str | None = None
