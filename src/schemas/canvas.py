"""Pydantic schemas for the canvas overlay."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Width of canvas_connections.label
MAX_LABEL_LENGTH = 255


class CanvasPositionItem(BaseModel):
    """Position of a bookmark node on the canvas."""

    model_config = ConfigDict(from_attributes=True)

    bookmark_id: int
    x_position: float = 0.0
    y_position: float = 0.0


class CanvasConnectionItem(BaseModel):
    """Directed, labeled edge between two bookmark nodes."""

    model_config = ConfigDict(from_attributes=True)

    from_bookmark_id: int
    to_bookmark_id: int
    label: str = Field(default="", max_length=MAX_LABEL_LENGTH)

    @field_validator("label", mode="before")
    @classmethod
    def default_label(cls, v: Any) -> Any:
        """Null label becomes empty."""
        return "" if v is None else v


class CanvasSave(BaseModel):
    """Complete canvas state for one collection (replace-all)."""

    positions: list[CanvasPositionItem] = []
    connections: list[CanvasConnectionItem] = []

    @field_validator("positions", "connections", mode="before")
    @classmethod
    def default_empty(cls, v: Any) -> Any:
        """Null lists mean an empty layout."""
        return [] if v is None else v


class CanvasResponse(BaseModel):
    """Stored canvas state for one collection."""

    positions: list[CanvasPositionItem] = []
    connections: list[CanvasConnectionItem] = []
