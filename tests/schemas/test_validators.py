"""Tests for shared schema validators and types."""
from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from schemas.bookmark import BookmarkCreate, BookmarkResponse
from schemas.canvas import CanvasConnectionItem, CanvasSave
from schemas.collection import CollectionCreate
from schemas.validators import ensure_utc, optional_id, strip_text


class TestEnsureUtc:
    """Datetimes leave the API as aware UTC values."""

    def test_naive_value_is_taken_as_utc(self) -> None:
        value = datetime(2024, 5, 1, 12, 30, 0, 123456)
        assert ensure_utc(value) == datetime(2024, 5, 1, 12, 30, 0, 123456, tzinfo=UTC)

    def test_other_offset_is_converted(self) -> None:
        value = datetime(2024, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(value) == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    def test_naive_and_aware_serialize_identically(self) -> None:
        """A row read back from SQLite renders like the freshly created one."""
        fields = {
            "id": 1,
            "user_id": 1,
            "collection_id": None,
            "title": "t",
            "url": "",
            "type": "link",
            "content": "",
            "description": "",
            "favorite": False,
        }
        aware = datetime(2024, 5, 1, 12, 0, 0, 500, tzinfo=UTC)
        naive = aware.replace(tzinfo=None)

        from_memory = BookmarkResponse(**fields, created_at=aware, updated_at=aware)
        from_storage = BookmarkResponse(**fields, created_at=naive, updated_at=naive)

        assert from_memory.model_dump(mode="json") == from_storage.model_dump(mode="json")


class TestTextValidators:
    """Non-string input reaches pydantic's type check instead of crashing."""

    def test_strip_text(self) -> None:
        assert strip_text("  a  ") == "a"
        assert strip_text(None) == ""
        assert strip_text(5) == 5

    @pytest.mark.parametrize("title", [123, 1.5, ["x"], {"a": 1}, True])
    def test_bookmark_title_wrong_type(self, title: object) -> None:
        with pytest.raises(ValidationError) as exc_info:
            BookmarkCreate.model_validate({"title": title})
        assert exc_info.value.errors()[0]["loc"] == ("title",)

    @pytest.mark.parametrize("name", [7, ["Work"]])
    def test_collection_name_wrong_type(self, name: object) -> None:
        with pytest.raises(ValidationError) as exc_info:
            CollectionCreate.model_validate({"name": name})
        assert exc_info.value.errors()[0]["loc"] == ("name",)

    def test_optional_id(self) -> None:
        assert optional_id(0) is None
        assert optional_id(None) is None
        assert optional_id(4) == 4


class TestCanvasSchemas:
    """Canvas payload defaults and limits."""

    @pytest.mark.parametrize("payload", [{}, {"positions": None, "connections": None}])
    def test_missing_lists_default_to_empty(self, payload: dict) -> None:
        data = CanvasSave.model_validate(payload)
        assert data.positions == []
        assert data.connections == []

    def test_label_length_limited(self) -> None:
        with pytest.raises(ValidationError):
            CanvasConnectionItem(from_bookmark_id=1, to_bookmark_id=2, label="x" * 256)
        assert CanvasConnectionItem(from_bookmark_id=1, to_bookmark_id=2, label=None).label == ""
