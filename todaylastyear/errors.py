# ABOUTME: Exception types raised at the remote fetch boundary.
# ABOUTME: Transport and decode failures share one FetchError base that callers absorb.


class FetchError(Exception):
    """A remote fetch produced no usable payload."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{message} ({url})")
        self.url = url


class TransportError(FetchError):
    """No response, connection failure, or a non-2xx status."""


class DecodeError(FetchError):
    """The response body was not valid JSON or did not match the expected schema."""
