"""Errors raised while provisioning a Nexus instance."""

from __future__ import annotations


class NexusInitError(Exception):
    """Base class for every provisioning failure.

    Any instance reaching the process boundary aborts the run.
    """


class NexusConfigError(NexusInitError, ValueError):
    """Raised when the configuration document cannot be loaded or is invalid."""

    def __init__(self, issues: list[str]) -> None:
        """Capture configuration issues whilst preserving the aggregated message."""
        message = "\n".join(issues)
        super().__init__(message)
        self.issues = issues


class NexusTransportError(NexusInitError):
    """Raised when a request never produced an HTTP response."""

    def __init__(self, message: str, *, operation: str) -> None:
        """Initialise with a message and the operation that failed."""
        self.operation = operation
        super().__init__(message)

    @classmethod
    def request_failed(cls, operation: str, reason: str) -> NexusTransportError:
        """Return an error for connection, DNS, TLS or timeout failures."""
        return cls(f"{operation} failed: {reason}", operation=operation)


class NexusAPIError(NexusInitError):
    """Raised when Nexus answers with a status outside the expected set."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def unexpected_status(cls, operation: str, status_code: int) -> NexusAPIError:
        """Return an error for a status the operation does not accept."""
        return cls(
            f"{operation}: unexpected HTTP status {status_code}",
            status_code=status_code,
        )


class NexusResponseShapeError(NexusInitError):
    """Raised when a response body is missing or cannot be decoded."""

    @classmethod
    def undecodable(cls, operation: str, reason: str) -> NexusResponseShapeError:
        """Return an error for a body that does not match its wire schema."""
        return cls(f"{operation}: malformed response body: {reason}")


class ReconciliationDepthError(NexusInitError):
    """Raised when a resource is still absent after a reported creation."""

    def __init__(self, key: str, *, attempts: int) -> None:
        """Initialise with the resource key and the creation calls made."""
        self.key = key
        self.attempts = attempts
        super().__init__(
            f"{key} still reported absent after {attempts} creation attempt(s); "
            "the server flapped between found and not-found"
        )


__all__ = [
    "NexusAPIError",
    "NexusConfigError",
    "NexusInitError",
    "NexusResponseShapeError",
    "NexusTransportError",
    "ReconciliationDepthError",
]
