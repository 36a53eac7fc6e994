"""Pydantic schemas for tag endpoints."""
from pydantic import BaseModel


class TagCount(BaseModel):
    """Tag with its usage count."""

    name: str
    count: int
