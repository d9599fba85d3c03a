"""Exceptions raised by the WeChat API client."""

from __future__ import annotations


class WeixinError(Exception):
    """Base exception for all WeChat API client errors."""

    pass


class TransportError(WeixinError):
    """Raised when a request never produced a usable HTTP response.

    Covers connection failures, timeouts and non-2xx status codes. The
    underlying httpx exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, path: str = "") -> None:
        """Initialize the exception.

        Args:
            message: Error message
            path: API path that was being requested
        """
        self.path = path
        super().__init__(message)


class DecodeError(WeixinError):
    """Raised when a response body is not the JSON object an endpoint expects.

    The message is the raw body text so callers can read provider error
    payloads this library does not model.
    """

    def __init__(self, body: bytes) -> None:
        self.body = body
        super().__init__(body.decode("utf-8", errors="replace"))


class WeixinAPIError(WeixinError):
    """Raised when an enveloped response reports a non-zero ``errcode``.

    Attributes:
        errcode: WeChat error code.
        errmsg: WeChat error message.
    """

    def __init__(self, errcode: int, errmsg: str) -> None:
        self.errcode = errcode
        self.errmsg = errmsg
        super().__init__(f"WeChat API Error {errcode}: {errmsg}")
