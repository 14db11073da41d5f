from __future__ import annotations
from typing import Optional


class DataQualityClientError(Exception):
    """Base class for every error surfaced to the user by the client."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DataQualityClientError):
    """Raised when local input fails pre-flight checks; no request is sent."""


class TransportError(DataQualityClientError):
    """Raised when the analysis request fails, is rejected, or times out."""

    def __init__(self, message: str = "", *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyResultError(DataQualityClientError):
    """Raised when the service answered successfully without a usable report."""


class RequestInProgressError(DataQualityClientError):
    """Raised when an operation needs the controller idle but a request is in flight."""


class InvalidStateError(DataQualityClientError):
    """Raised on a state transition the ingestion state machine does not allow."""
