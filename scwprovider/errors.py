"""
scwprovider errors.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .diagnostics import Diagnostic


class ScalewayError(Exception):
    """Base exception for all scwprovider errors."""
    pass


class ResponseError(ScalewayError):
    """The Scaleway API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str, error_type: str | None = None):
        self.status_code = status_code
        self.message = message
        self.error_type = error_type
        super().__init__(f"scaleway-sdk: http error {status_code}: {message}")


class NotFoundError(ResponseError):
    """The resource does not exist (anymore)."""

    def __init__(self, message: str = "resource is not found", error_type: str | None = "not_found"):
        super().__init__(404, message, error_type)


class TransientHTTPError(ScalewayError):
    """HTTP errors that should be retried (429, 5xx, network)."""
    pass


class ValidationError(ScalewayError):
    """Invalid resource configuration, never retried."""
    pass


class WaitTimeoutError(ScalewayError):
    """A resource did not reach a terminal status in time."""

    def __init__(self, resource: str, timeout: float):
        self.resource = resource
        self.timeout = timeout
        super().__init__(f"timeout after {timeout:g}s waiting for {resource}")


class ProviderError(ScalewayError):
    """Raised to the engine with the diagnostics of a failed operation."""

    def __init__(self, diagnostics: list["Diagnostic"]):
        self.diagnostics = diagnostics
        super().__init__("; ".join(str(diagnostic) for diagnostic in diagnostics))


def is_not_found(err: BaseException) -> bool:
    """Return True if err means the remote resource is gone."""
    return isinstance(err, NotFoundError)
