"""Response envelope shared by every endpoint."""
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, model_serializer

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Success envelope: ``{"success": true, "data"?: ..., "message"?: ...}``.

    ``data`` and ``message`` are omitted from the payload when not set, so
    clients can rely on key presence.
    """

    success: bool = True
    message: str | None = None
    data: DataT | None = None

    @model_serializer(mode="wrap")
    def _omit_unset_members(self, handler):  # noqa: ANN001, ANN202
        payload = handler(self)
        return {
            key: value
            for key, value in payload.items()
            if key == "success" or value is not None
        }


class ErrorResponse(BaseModel):
    """Failure envelope: ``{"error": "<message>"}``. Presence of ``error`` means failure."""

    error: str


def error_responses(*status_codes: int) -> dict[int | str, dict[str, Any]]:
    """Build the ``responses=`` mapping documenting error envelopes for a route."""
    return {code: {"model": ErrorResponse} for code in status_codes}
