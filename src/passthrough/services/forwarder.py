"""Request forwarding pipeline."""

import httpx
import structlog
from starlette.concurrency import run_in_threadpool
from starlette.requests import ClientDisconnect, Request
from starlette.responses import Response

from ..errors import BodyReadError, InvalidMethodError, UpstreamTransportError
from ..models import FilteredHeaders, ProxyRequest, ProxyResponse
from .header_filter import filter_headers
from .request_logger import RequestLogger

logger = structlog.get_logger(__name__)

BODYLESS_METHODS = {"GET", "DELETE"}
BODY_METHODS = {"POST", "PUT"}
JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def request_path(request: Request) -> str:
    """Path exactly as the client sent it, without percent re-encoding."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1")
    return request.scope.get("path", "")


def request_query_string(request: Request) -> str:
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"?{query}" if query else ""


def request_headers(request: Request) -> list[tuple[str, str]]:
    return [
        (name.decode("latin-1"), value.decode("latin-1"))
        for name, value in request.headers.raw
    ]


class Forwarder:
    """Forwards inbound requests to a single upstream and relays the answer."""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient,
        request_logger: RequestLogger,
    ):
        self.base_url = base_url
        self.client = client
        self.request_logger = request_logger
        self.logger = logger.bind(component="Forwarder")

    async def handle(self, request: Request) -> Response:
        """Run one proxy cycle and return the response for the caller."""
        proxy_request = ProxyRequest(
            method=request.method.upper(),
            path=request_path(request),
            query_string=request_query_string(request),
            headers=request_headers(request),
        )
        method = proxy_request.method

        try:
            await run_in_threadpool(
                self.request_logger.log_start,
                method,
                proxy_request.path,
                proxy_request.query_string,
                proxy_request.header_map(),
            )

            actual_url = proxy_request.url_for(self.base_url)
            await run_in_threadpool(self.request_logger.log_url, method, actual_url)

            filtered = filter_headers(proxy_request.headers)
            proxy_request.body = await self._read_body(request)

            proxy_response = await self._dispatch(proxy_request, actual_url, filtered)
            await run_in_threadpool(
                self.request_logger.log_response,
                method,
                actual_url,
                proxy_response.status_code,
                proxy_response.text,
            )

            return self._build_response(proxy_response)
        except Exception as e:
            await run_in_threadpool(
                self.request_logger.log_error, method, proxy_request.path, e
            )
            raise

    async def _read_body(self, request: Request) -> bytes:
        try:
            return await request.body()
        except ClientDisconnect as e:
            raise BodyReadError("Client disconnected while sending the body") from e
        except RuntimeError as e:
            raise BodyReadError(f"Could not read request body: {e}") from e

    async def _dispatch(
        self, proxy_request: ProxyRequest, actual_url: str, filtered: FilteredHeaders
    ) -> ProxyResponse:
        method = proxy_request.method
        headers = filtered.to_httpx()

        if method in BODYLESS_METHODS:
            content = None
        elif method in BODY_METHODS:
            text = proxy_request.body.decode("utf-8", errors="replace")
            content = text.encode("utf-8")
            headers["Content-Type"] = JSON_CONTENT_TYPE
        else:
            raise InvalidMethodError(method)

        self.logger.debug(
            "Forwarding request",
            method=method,
            url=actual_url,
            headers=filtered.names(),
            accept=filtered.accept,
        )

        try:
            response = await self.client.request(
                method, actual_url, headers=headers, content=content
            )
        except httpx.TransportError as e:
            raise UpstreamTransportError(
                f"Could not reach upstream at {actual_url}: {e}"
            ) from e
        except httpx.DecodingError as e:
            raise BodyReadError(
                f"Could not read upstream response body from {actual_url}: {e}"
            ) from e

        return ProxyResponse.from_httpx(response)

    @staticmethod
    def _build_response(proxy_response: ProxyResponse) -> Response:
        headers = {}
        if proxy_response.content_type:
            headers["content-type"] = proxy_response.content_type
        return Response(
            content=proxy_response.body,
            status_code=proxy_response.status_code,
            headers=headers,
        )
