"""Inbound header filtering for outbound requests."""

import re
from typing import Iterable, Tuple

import structlog

from ..errors import HeaderBuildError
from ..models import FilteredHeaders

logger = structlog.get_logger(__name__)

# Matched as substrings of the lower-cased header name.
DENIED_HEADERS = (
    "referer",
    "origin",
    "host",
    "sec-",
    "connection",
    "pragma",
    "cache-control",
    "content-length",
)

CONTENT_TYPE = "content-type"

_TOKEN = r"[A-Za-z0-9!#$%&'*+.^_`|~-]+"
MEDIA_TYPE_PATTERN = re.compile(rf"^\s*{_TOKEN}/{_TOKEN}\s*(;.*)?$")


def is_denied(name: str) -> bool:
    """Check whether a header must never reach the upstream."""
    lowered = name.lower()
    return any(denied in lowered for denied in DENIED_HEADERS)


def parse_media_type(value: str) -> str:
    """Validate a content-type value for use as an accept media type."""
    if not MEDIA_TYPE_PATTERN.match(value):
        raise HeaderBuildError(f"The format of value '{value}' is invalid.")
    return value.strip()


def filter_headers(headers: Iterable[Tuple[str, str]]) -> FilteredHeaders:
    """Split inbound headers into forwarded headers and accept media types.

    Denied headers are dropped. Any header whose name contains
    ``content-type`` is turned into an accept preference instead of being
    forwarded. Everything else passes through unchanged and in order.
    """
    forwarded = []
    accept = []

    for name, value in headers:
        if is_denied(name):
            logger.debug("Dropping header", header=name)
            continue

        if CONTENT_TYPE in name.lower():
            accept.append(parse_media_type(value))
            continue

        forwarded.append((name, value))

    return FilteredHeaders(headers=forwarded, accept=accept)
