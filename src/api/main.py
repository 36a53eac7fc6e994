"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import auth, bookmarks, canvas, collections, media, tags
from core.config import get_settings

logger = logging.getLogger(__name__)

# Parameter sources that are noise in a client-facing message
_LOCATION_PREFIXES = {"body", "query", "path", "header"}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        # HSTS: enforce HTTPS for 1 year, including subdomains
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking - API shouldn't be framed
        response.headers["X-Frame-Options"] = "DENY"
        return response


def validation_error_message(exc: RequestValidationError) -> str:
    """Reduce a validation failure to the first human-readable message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]

    if error.get("type") == "json_invalid":
        return "Invalid JSON body"
    ctx = error.get("ctx") or {}
    # Messages raised by our own validators, without pydantic's "Value error, " prefix
    if "error" in ctx:
        return str(ctx["error"])

    location = [
        str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES
    ]
    message = error.get("msg", "Invalid request")
    return f"{'.'.join(location)}: {message}" if location else message


app_settings = get_settings()

app = FastAPI(
    title="Bookmark Canvas API",
    description="Bookmarks organized in nested collections, with tags and a canvas overlay.",
    version="0.1.0",
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    _request: Request, exc: StarletteHTTPException,
) -> JSONResponse:
    """Render every HTTP error as ``{"error": "<message>"}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Invalid input is a 400 carrying the first validation message."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": validation_error_message(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception,
) -> JSONResponse:
    """Log unexpected failures; clients only see a generic message."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Server error"},
    )


# Security headers middleware (runs after CORS, adds headers to responses)
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_origin_regex=app_settings.cors_origin_regex or None,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-User-Id", "X-User-Email"],
)

app.include_router(auth.router)
app.include_router(bookmarks.router)
app.include_router(collections.router)
app.include_router(canvas.router)
app.include_router(tags.router)
app.include_router(media.router)
