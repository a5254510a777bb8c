"""Data models for the passthrough proxy."""

from typing import Dict, List, Tuple

import httpx
from pydantic import BaseModel, Field

from .errors import HeaderBuildError

# Inbound framing headers; outbound bodies are always sent buffered.
FRAMING_HEADERS = {"transfer-encoding"}


class ProxyRequest(BaseModel):
    """An inbound request as seen by the forwarder."""

    method: str = Field(..., description="HTTP method, upper-cased")
    path: str = Field(..., description="Raw request path")
    query_string: str = Field("", description="Query string including the leading '?', or empty")
    headers: List[Tuple[str, str]] = Field(
        default_factory=list, description="Inbound headers in received order"
    )
    body: bytes = Field(b"", description="Raw request body")

    def url_for(self, base_url: str) -> str:
        """Target URL on the upstream; plain concatenation, no normalization."""
        return f"{base_url}{self.path}{self.query_string}"

    def header_map(self) -> Dict[str, List[str]]:
        """Headers grouped by name, keeping first-seen order and spelling."""
        grouped: Dict[str, List[str]] = {}
        names: Dict[str, str] = {}
        for name, value in self.headers:
            key = names.setdefault(name.lower(), name)
            grouped.setdefault(key, []).append(value)
        return grouped


class ProxyResponse(BaseModel):
    """The buffered upstream response."""

    status_code: int = Field(..., description="Upstream status code")
    content_type: str = Field("", description="Upstream content-type header, or empty")
    body: bytes = Field(b"", description="Upstream body bytes")

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "ProxyResponse":
        return cls(
            status_code=response.status_code,
            content_type=response.headers.get("content-type", ""),
            body=response.content,
        )


class FilteredHeaders(BaseModel):
    """Inbound headers after the deny filter and content-type redirect."""

    model_config = {"frozen": True}

    headers: List[Tuple[str, str]] = Field(
        default_factory=list, description="Headers forwarded verbatim"
    )
    accept: List[str] = Field(
        default_factory=list, description="Media types taken from content-type headers"
    )

    def names(self) -> List[str]:
        return [name for name, _ in self.headers]

    def to_httpx(self) -> httpx.Headers:
        """Build outbound headers; accept values join any forwarded Accept header."""
        pairs = [
            (name, value)
            for name, value in self.headers
            if name.lower() not in FRAMING_HEADERS
        ]
        pairs += [("Accept", media_type) for media_type in self.accept]
        try:
            return httpx.Headers(pairs)
        except (UnicodeEncodeError, TypeError, ValueError) as e:
            raise HeaderBuildError(f"Could not build outbound headers: {e}") from e
