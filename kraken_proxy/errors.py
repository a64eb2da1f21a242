"""Error types shared by the gate, the handlers and the error boundary."""
from typing import Any, Dict, Optional

GENERIC_ERROR_MESSAGE = "Something went very wrong!"


class AppError(Exception):
    """Base error carrying an HTTP status code.

    is_operational separates anticipated failures (bad credentials, upstream
    rejections) from programming defects.
    """
    code = "ERROR"
    default_status = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        is_operational: bool = True
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status
        if self.status_code < 400:
            raise ValueError(f"Error status must be >= 400, got {self.status_code}")
        self.is_operational = is_operational

    def to_body(self) -> Dict[str, Any]:
        return error_body(self.code, self.message)


class ValidationError(AppError):
    """Malformed request payload."""
    code = "VALIDATION"
    default_status = 400


class AuthenticationError(AppError):
    """Missing, malformed or unverifiable credentials."""
    code = "AUTH_INVALID"
    default_status = 401


class TokenFormatError(AuthenticationError):
    """Credential token could not be decoded into its envelope structure."""


class IntegrityError(AuthenticationError):
    """Envelope failed authenticated decryption or is structurally invalid."""


class UpstreamError(AppError):
    """Failure reported by the Kraken API or the transport to it."""
    code = "UPSTREAM_ERROR"
    default_status = 500


class InternalError(AppError):
    code = "INTERNAL"
    default_status = 500

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message, is_operational=False)


def error_body(code: str, message: str) -> Dict[str, Any]:
    """Build the JSON body every error response uses."""
    return {
        "status": "error",
        "code": code,
        "message": message
    }
