"""Exceptions raised while forwarding a request."""


class PassthroughError(Exception):
    """Base class for proxy cycle failures."""


class InvalidMethodError(PassthroughError):
    """Inbound method is not one of GET, DELETE, POST or PUT."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Invalid request method: {method}")


class UpstreamTransportError(PassthroughError):
    """The upstream could not be reached or the exchange broke off."""


class BodyReadError(PassthroughError):
    """The inbound body could not be read."""


class HeaderBuildError(PassthroughError):
    """Outbound headers could not be constructed."""
