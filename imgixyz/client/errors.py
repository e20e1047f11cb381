"""Exceptions raised by the imgix API client."""


class ImgixClientError(Exception):
    """Base exception for imgix client errors."""


class InvalidArgumentError(ImgixClientError, ValueError):
    """Raised before any I/O when a required identifier or name is missing."""


class TransportError(ImgixClientError):
    """Raised when a request fails below HTTP (connection, timeout, protocol).

    The original httpx exception is chained as ``__cause__``.
    """


class RemoteError(ImgixClientError):
    """Raised when the API answers with a non-2xx status.

    The raw body is kept verbatim; imgix error bodies are meant for
    operators, not for parsing.
    """

    def __init__(self, status_code: int, response_body: str):
        super().__init__(f"HTTP {status_code}: {response_body}")
        self.status_code = status_code
        self.response_body = response_body


class DecodeError(ImgixClientError):
    """Raised when a 2xx response cannot be parsed into the expected document."""

    def __init__(self, message: str, response_body: str | None = None):
        super().__init__(message)
        self.response_body = response_body


class AmbiguousResultError(ImgixClientError):
    """Raised when a name lookup matches more than one source."""

    def __init__(self, name: str, count: int):
        super().__init__(
            f"more than one source was found with name: {name} ({count} matches); "
            "rename the duplicates or import by id"
        )
        self.name = name
        self.count = count
