"""
Reusable field validators and types for schemas.

The text validators run before pydantic's own type check, so anything that is
not a string is handed back unchanged for pydantic to reject.
"""
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator

from core.config import get_settings


def strip_text(value: Any) -> Any:
    """Trim a single-line text field; null becomes empty."""
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    return value.strip()


def validate_title(title: Any) -> Any:
    """Trim a bookmark title and require it to be non-empty."""
    if title is not None and not isinstance(title, str):
        return title
    trimmed = (title or "").strip()
    if not trimmed:
        raise ValueError("Title is required")
    settings = get_settings()
    if len(trimmed) > settings.max_title_length:
        raise ValueError(
            f"Title exceeds maximum length of {settings.max_title_length:,} characters "
            f"(got {len(trimmed):,} characters).",
        )
    return trimmed


def validate_collection_name(name: Any) -> Any:
    """Trim a collection name and require it to be non-empty."""
    if name is not None and not isinstance(name, str):
        return name
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValueError("Collection name is required")
    settings = get_settings()
    if len(trimmed) > settings.max_collection_name_length:
        raise ValueError(
            f"Collection name exceeds maximum length of "
            f"{settings.max_collection_name_length:,} characters.",
        )
    return trimmed


def normalize_tag_names(tags: list[str] | None) -> list[str]:
    """
    Trim tag names, drop empty ones and duplicates (first occurrence wins).

    Tag names are case-sensitive: "Design" and "design" are different tags.

    Raises:
        ValueError: If a tag name exceeds the configured maximum length.
    """
    if not tags:
        return []
    max_length = get_settings().max_tag_length
    normalized: list[str] = []
    for tag in tags:
        trimmed = tag.strip()
        if not trimmed:
            continue  # Skip empty tags silently
        if len(trimmed) > max_length:
            raise ValueError(
                f"Tag '{trimmed[:20]}...' exceeds maximum length of {max_length} characters.",
            )
        if trimmed not in normalized:
            normalized.append(trimmed)
    return normalized


def optional_id(value: Any) -> Any:
    """Treat 0 / null as "no reference" for optional foreign ids."""
    return None if value is None or value == 0 else value


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values (SQLite) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
