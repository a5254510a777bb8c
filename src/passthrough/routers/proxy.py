"""Catch-all route handing every request to the forwarder."""

from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from ..services import Forwarder


def get_forwarder(request: Request) -> Forwarder:
    return request.app.state.forwarder


async def proxy(request: Request) -> Response:
    """Forward the request upstream and relay the response."""
    return await get_forwarder(request).handle(request)


# methods=None matches every HTTP method, so unsupported ones reach the forwarder.
proxy_route = Route("/{path:path}", endpoint=proxy, methods=None, name="proxy")
