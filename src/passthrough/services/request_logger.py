"""Request event log written to disk and mirrored to console."""

import json
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from httpx import codes
from rich.console import Console

DEFAULT_MAX_CONSOLE_CHARS = 2300
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def truncate_for_console(message: str, limit: int = DEFAULT_MAX_CONSOLE_CHARS) -> str:
    """Cut a message to ``limit`` characters, marking the cut with ``...``."""
    if len(message) > limit:
        return f"{message[:limit]}..."
    return message


class RequestLogger:
    """Append-only log of proxy events.

    The file is opened once by :meth:`open` and released by :meth:`close`.
    Every event is written as a single block guarded by a lock, so concurrent
    requests never interleave partial entries.
    """

    def __init__(
        self,
        path: str | Path,
        console: Optional[Console] = None,
        max_console_chars: int = DEFAULT_MAX_CONSOLE_CHARS,
    ):
        self.path = Path(path)
        self.console = console or Console(markup=False, highlight=False, emoji=False)
        self.max_console_chars = max_console_chars
        self._file: Optional[TextIO] = None
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._file is None

    def open(self) -> "RequestLogger":
        if self._file is None:
            self._file = self.path.open("a", encoding="utf-8")
        return self

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self) -> "RequestLogger":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def log_start(
        self, method: str, path: str, query_string: str, headers: Dict[str, List[str]]
    ) -> None:
        headers_json = json.dumps(headers)
        self._log(
            f"Received {method} request\n"
            f"- For URI {path}\n"
            f"- With Query String {query_string}\n"
            f"- And headers {headers_json}\n\n"
        )

    def log_url(self, method: str, url: str) -> None:
        self._log(f"Sending {method} request\n- To {url}\n\n")

    def log_response(self, method: str, url: str, status_code: int, body: str) -> None:
        reason = codes.get_reason_phrase(status_code)
        status = f"{status_code} {reason}" if reason else str(status_code)
        self._log(
            f"Received {method} response\n"
            f"- For url {url}\n"
            f"- With status code {status}\n"
            f"- And body {body}\n\n"
        )

    def log_error(self, method: str, path: str, error: BaseException) -> None:
        self._log(
            f"An error occurred on {method} request\n"
            f"- To {path}:\n"
            f"- {error}\n\n"
        )

    def _log(self, message: str) -> None:
        timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        message = f"({timestamp}): {message}"

        with self._lock:
            if self._file is None:
                raise RuntimeError("Request log is not open")
            self._file.write(message)
            self._file.flush()
            self.console.print(
                truncate_for_console(message, self.max_console_chars), soft_wrap=True
            )
