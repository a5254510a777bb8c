"""Passthrough - transparent HTTP reverse proxy."""

__version__ = "0.1.0"

from .app import create_app
from .config import Settings
from .errors import (
    BodyReadError,
    HeaderBuildError,
    InvalidMethodError,
    PassthroughError,
    UpstreamTransportError,
)
from .models import FilteredHeaders, ProxyRequest, ProxyResponse
from .services import Forwarder, RequestLogger, filter_headers

__all__ = [
    "create_app",
    "Settings",
    "Forwarder",
    "RequestLogger",
    "filter_headers",
    "ProxyRequest",
    "ProxyResponse",
    "FilteredHeaders",
    "PassthroughError",
    "InvalidMethodError",
    "UpstreamTransportError",
    "BodyReadError",
    "HeaderBuildError",
]
