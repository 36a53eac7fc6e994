"""Bookmark model for storing user bookmarks."""
from enum import StrEnum

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin


class BookmarkType(StrEnum):
    """Kinds of bookmark accepted by the API."""

    LINK = "link"
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"


class Bookmark(Base, TimestampMixin):
    """
    Bookmark model - a saved link, note, image or video.

    collection_id is intentionally not a foreign key. Deleting a collection
    keeps its bookmarks with the stale id, and reads report them as
    uncategorized (collection_name is null).
    """

    __tablename__ = "bookmarks"
    __table_args__ = (
        Index("ix_bookmarks_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    collection_id: Mapped[int | None] = mapped_column(nullable=True, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=BookmarkType.LINK.value)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    favorite: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )
