"""Services module for the passthrough proxy."""

from .forwarder import Forwarder
from .header_filter import DENIED_HEADERS, filter_headers
from .request_logger import RequestLogger, truncate_for_console

__all__ = [
    "Forwarder",
    "RequestLogger",
    "DENIED_HEADERS",
    "filter_headers",
    "truncate_for_console",
]
