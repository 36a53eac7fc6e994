"""Collection model for the per-user folder hierarchy."""
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin


class Collection(Base, TimestampMixin):
    """
    Collection model - a node in the user's collection forest.

    parent_id is a plain column rather than a foreign key: deleting a parent
    leaves its children pointing at a missing row, and the tree is rebuilt on
    read with such children promoted to roots.
    """

    __tablename__ = "collections"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_id: Mapped[int | None] = mapped_column(nullable=True, index=True)
