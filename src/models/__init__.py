"""SQLAlchemy models."""
from models.base import Base, TimestampMixin
from models.user import User
from models.collection import Collection
from models.tag import Tag, bookmark_tags  # Must be before bookmark so the junction table exists
from models.bookmark import Bookmark, BookmarkType
from models.canvas import CanvasConnection, CanvasPosition

__all__ = [
    "Base",
    "Bookmark",
    "BookmarkType",
    "CanvasConnection",
    "CanvasPosition",
    "Collection",
    "Tag",
    "TimestampMixin",
    "User",
    "bookmark_tags",
]
