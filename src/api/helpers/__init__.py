"""API helper utilities."""
from api.helpers.request_body import json_body_openapi, parse_json_body

__all__ = [
    "json_body_openapi",
    "parse_json_body",
]
