"""Canvas overlay models: node positions and labeled edges per collection."""
from sqlalchemy import Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin


class CanvasPosition(Base, TimestampMixin):
    """Position of one bookmark on one collection's canvas."""

    __tablename__ = "bookmark_canvas_positions"
    __table_args__ = (
        UniqueConstraint(
            "bookmark_id", "collection_id", name="uq_canvas_positions_bookmark_collection",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    bookmark_id: Mapped[int] = mapped_column(
        ForeignKey("bookmarks.id", ondelete="CASCADE"),
        index=True,
    )
    collection_id: Mapped[int] = mapped_column(
        ForeignKey("collections.id", ondelete="CASCADE"),
        index=True,
    )
    x_position: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    y_position: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


class CanvasConnection(Base, TimestampMixin):
    """Directed, labeled edge between two bookmarks on a collection's canvas."""

    __tablename__ = "bookmark_canvas_connections"

    id: Mapped[int] = mapped_column(primary_key=True)
    from_bookmark_id: Mapped[int] = mapped_column(
        ForeignKey("bookmarks.id", ondelete="CASCADE"),
        index=True,
    )
    to_bookmark_id: Mapped[int] = mapped_column(
        ForeignKey("bookmarks.id", ondelete="CASCADE"),
        index=True,
    )
    collection_id: Mapped[int] = mapped_column(
        ForeignKey("collections.id", ondelete="CASCADE"),
        index=True,
    )
    label: Mapped[str] = mapped_column(String(255), nullable=False, default="")
