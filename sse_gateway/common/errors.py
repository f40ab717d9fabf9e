"""
Error Definitions

Defines custom exception classes used by the gateway for unified error handling.
Every error is rendered as a plain-text body carrying its message.
"""

from typing import Any, Optional


class AppError(Exception):
    """
    Gateway Base Exception

    Base class for all custom exceptions, containing error message, code and HTTP status.
    """

    def __init__(
        self,
        message: str,
        code: str = "internal_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ):
        """
        Initialize exception

        Args:
            message: Error message (sent to the caller as the response body)
            code: Error code (used in logs)
            details: Extra error details (used in logs)
            status_code: HTTP status code
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.status_code = status_code


class ValidationError(AppError):
    """
    Request Validation Error

    Raised when the inbound JSON is malformed or required fields are missing.
    """

    def __init__(
        self,
        message: str = "bad request",
        code: str = "validation_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=400,
        )


class RequestTooLargeError(AppError):
    """
    Inbound Body Too Large

    Raised when the inbound request body exceeds MAX_REQUEST_BODY_BYTES.
    """

    def __init__(
        self,
        message: str = "request entity too large",
        code: str = "request_too_large",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=413,
        )


class PolicyError(AppError):
    """
    Upstream Policy Error

    Raised when the upstream host is not on the allow-list.
    """

    def __init__(
        self,
        message: str = "upstream host not allowed",
        code: str = "host_not_allowed",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=403,
        )


class UpstreamConnectionError(AppError):
    """
    Upstream Connection Error

    Raised on connect/TLS/timeout failure before upstream headers arrived.
    """

    def __init__(
        self,
        message: str = "Upstream connection error",
        code: str = "upstream_connection_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=502,
        )


class UpstreamStreamError(AppError):
    """
    Upstream Stream Error

    Raised when the upstream stream fails after headers were received.
    """

    def __init__(
        self,
        message: str = "Upstream stream error",
        code: str = "upstream_stream_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=502,
        )
