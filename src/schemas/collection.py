"""Pydantic schemas for collection endpoints."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.validators import UtcDatetime, optional_id, validate_collection_name


class CollectionCreate(BaseModel):
    """Schema for creating a collection."""

    name: str = Field(default="", validate_default=True)
    parent_id: int | None = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v: Any) -> Any:
        """Trim and require a name."""
        return validate_collection_name(v)

    @field_validator("parent_id", mode="before")
    @classmethod
    def normalize_parent(cls, v: int | None) -> int | None:
        """0 means top-level."""
        return optional_id(v)


class CollectionUpdate(BaseModel):
    """Schema for a partial collection update (rename and/or move)."""

    name: str | None = None
    parent_id: int | None = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v: Any) -> Any:
        """A present name must be non-empty."""
        return validate_collection_name(v)

    @field_validator("parent_id", mode="before")
    @classmethod
    def normalize_parent(cls, v: int | None) -> int | None:
        """0 / null moves the collection to the top level."""
        return optional_id(v)

    def field_updates(self) -> dict[str, Any]:
        """Column values explicitly present in the patch."""
        return {field: getattr(self, field) for field in self.model_fields_set}


class CollectionResponse(BaseModel):
    """A collection with its live bookmark count."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    parent_id: int | None
    created_at: UtcDatetime
    updated_at: UtcDatetime
    bookmark_count: int = 0


class CollectionTreeNode(CollectionResponse):
    """A collection with its child collections, as returned by the tree listing."""

    children: list["CollectionTreeNode"] = []
