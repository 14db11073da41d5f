from .errors import (
    DataQualityClientError,
    EmptyResultError,
    InvalidStateError,
    RequestInProgressError,
    TransportError,
    ValidationError,
)
from .state import IngestionState, InputMode
from .types import AnalysisReport, ColumnProfile, FileInput, QualityLevel

__all__ = [
    "AnalysisReport",
    "ColumnProfile",
    "DataQualityClientError",
    "EmptyResultError",
    "FileInput",
    "IngestionState",
    "InputMode",
    "InvalidStateError",
    "QualityLevel",
    "RequestInProgressError",
    "TransportError",
    "ValidationError",
]
