"""imgix API client - rate-limited transport, wire schemas, and source CRUD."""

from imgixyz.client.errors import (
    AmbiguousResultError,
    DecodeError,
    ImgixClientError,
    InvalidArgumentError,
    RemoteError,
    TransportError,
)
from imgixyz.client.http_client import (
    AuthenticatedRateLimitedTransport,
    HTTPClient,
    RateLimiter,
)
from imgixyz.client.schemas import MEDIA_TYPE, Deployment, Source
from imgixyz.client.sources import ImgixClient

__all__ = [
    "AmbiguousResultError",
    "AuthenticatedRateLimitedTransport",
    "DecodeError",
    "Deployment",
    "HTTPClient",
    "ImgixClient",
    "ImgixClientError",
    "InvalidArgumentError",
    "MEDIA_TYPE",
    "RateLimiter",
    "RemoteError",
    "Source",
    "TransportError",
]
