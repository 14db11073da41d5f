"""Single-request ingestion state machine.

The controller owns the input mode, the draft input for that mode, the
analysis options and the outcome of the one request it may have in flight.
States move IDLE -> SUBMITTING -> COMPLETE | FAILED and back to IDLE through
``reset``. Input is validated locally before anything reaches the network.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence, Union

from ..api.client import AnalysisClient
from ..core.constants import ACCEPTED_EXTENSIONS, FALLBACK_MESSAGES
from ..core.errors import (
    DataQualityClientError,
    InvalidStateError,
    RequestInProgressError,
    TransportError,
    ValidationError,
)
from ..core.state import IngestionState, InputMode, can_transition
from ..core.types import AnalysisReport, FileInput
from ..core.utils import _file_extension
from ..views.drilldown import ColumnDrilldown

logger = logging.getLogger("dqclient.ingest")

DraftInput = Union[None, str, FileInput, Sequence[FileInput]]

_UNSET: Any = object()


def _validate_file(value: DraftInput) -> FileInput:
    if value is None:
        raise ValidationError("No file selected")
    if isinstance(value, FileInput):
        files = [value]
    elif isinstance(value, (list, tuple)):
        files = list(value)
    else:
        raise ValidationError("No file selected")
    if not files:
        raise ValidationError("No file selected")
    if len(files) > 1:
        raise ValidationError("Only one file can be analyzed at a time")
    file = files[0]
    if not isinstance(file, FileInput):
        raise ValidationError("No file selected")
    ext = _file_extension(file.filename)
    if ext not in ACCEPTED_EXTENSIONS:
        accepted = ", ".join(ACCEPTED_EXTENSIONS)
        raise ValidationError(f"Unsupported file type '{ext or file.filename}'; expected one of {accepted}")
    return file


def _validate_url(value: DraftInput) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Please enter a valid URL")
    return value.strip()


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not JSON.
    raise ValueError(f"invalid JSON constant {name}")


def _validate_inline(value: DraftInput) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Please enter valid JSON data")
    try:
        json.loads(value, parse_constant=_reject_constant)
    except ValueError as exc:
        raise ValidationError("Invalid JSON format") from exc
    return value


_VALIDATORS = {
    InputMode.FILE: _validate_file,
    InputMode.URL: _validate_url,
    InputMode.INLINE: _validate_inline,
}


class IngestionController:
    def __init__(
        self,
        client: Optional[AnalysisClient] = None,
        *,
        mode: InputMode = InputMode.FILE,
        perform_pii_check: bool = True,
        perform_bias_check: bool = False,
    ) -> None:
        self.client = client or AnalysisClient()
        self.perform_pii_check = perform_pii_check
        self.perform_bias_check = perform_bias_check
        self._mode = InputMode(mode)
        self._draft: DraftInput = None
        self._state = IngestionState.IDLE
        self._report: Optional[AnalysisReport] = None
        self._failure: Optional[DataQualityClientError] = None
        self._error: Optional[str] = None

    # ---- Read-only view ----
    @property
    def state(self) -> IngestionState:
        return self._state

    @property
    def mode(self) -> InputMode:
        return self._mode

    @property
    def draft(self) -> DraftInput:
        return self._draft

    @property
    def report(self) -> Optional[AnalysisReport]:
        return self._report

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def failure(self) -> Optional[DataQualityClientError]:
        return self._failure

    @property
    def is_busy(self) -> bool:
        return self._state is IngestionState.SUBMITTING

    def drilldown(self) -> ColumnDrilldown:
        if self._report is None:
            raise InvalidStateError("No report available")
        return ColumnDrilldown(self._report.column_profiles)

    # ---- Input ----
    def select_mode(self, mode: Union[InputMode, str]) -> None:
        if self._state is not IngestionState.IDLE:
            raise InvalidStateError(f"Cannot change input mode while {self._state.value}")
        self._mode = InputMode(mode)
        self._draft = None
        self._clear_error()
        logger.debug("input mode selected", extra={"mode": self._mode.value})

    def set_input(self, value: DraftInput) -> None:
        self._draft = value

    # ---- Lifecycle ----
    async def submit(self, value: DraftInput = _UNSET) -> Optional[AnalysisReport]:
        """Validate the input and run one analysis request.

        Returns the report, or ``None`` when validation or the request failed;
        the reason is then available through ``error`` and ``failure``.
        """
        if self._state is IngestionState.SUBMITTING:
            raise RequestInProgressError("An analysis request is already in progress")
        if self._state is IngestionState.COMPLETE:
            raise InvalidStateError("Reset the current report before starting a new analysis")
        if self._state is IngestionState.FAILED:
            self.reset()

        candidate = self._draft if value is _UNSET else value
        try:
            payload = _VALIDATORS[self._mode](candidate)
        except ValidationError as exc:
            self._failure = exc
            self._error = exc.message
            logger.info("input rejected", extra={"mode": self._mode.value, "reason": exc.message})
            return None

        self._transition(IngestionState.SUBMITTING)
        self._report = None
        self._clear_error()
        logger.info("analysis submitted", extra={"mode": self._mode.value})

        try:
            report = await self._dispatch(payload)
        except DataQualityClientError as exc:
            self.on_failure(exc)
            return None
        except Exception as exc:
            logger.exception("unexpected error during analysis", extra={"mode": self._mode.value})
            self.on_failure(exc)
            return None
        except BaseException:
            # Cancelled mid-request: settle in FAILED so reset() works, then propagate.
            if self._state is IngestionState.SUBMITTING:
                self.on_failure(TransportError("The analysis request was cancelled"))
            raise

        self.on_success(report)
        return report

    def on_success(self, report: AnalysisReport) -> None:
        self._transition(IngestionState.COMPLETE)
        self._report = report
        self._clear_error()
        logger.info(
            "analysis complete",
            extra={
                "analysis_id": report.analysis_id,
                "health_score": report.health_score,
                "quality_level": report.quality_level.value,
            },
        )

    def on_failure(self, error: BaseException, fallback: Optional[str] = None) -> None:
        self._transition(IngestionState.FAILED)
        self._report = None
        message = getattr(error, "message", None) or str(error)
        self._error = message or fallback or FALLBACK_MESSAGES[self._mode.value]
        if isinstance(error, DataQualityClientError):
            self._failure = error
        else:
            self._failure = DataQualityClientError(self._error)
        logger.warning("analysis failed", extra={"mode": self._mode.value, "error": self._error})

    def reset(self) -> None:
        if self._state is IngestionState.SUBMITTING:
            raise RequestInProgressError("Cannot reset while an analysis request is in progress")
        if self._state is not IngestionState.IDLE:
            self._transition(IngestionState.IDLE)
        self._report = None
        self._clear_error()

    # ---- Internals ----
    async def _dispatch(self, payload: Any) -> AnalysisReport:
        options = {
            "perform_pii_check": self.perform_pii_check,
            "perform_bias_check": self.perform_bias_check,
        }
        if self._mode is InputMode.FILE:
            return await self.client.analyze_file(payload, **options)
        if self._mode is InputMode.URL:
            return await self.client.analyze_url(payload, **options)
        return await self.client.analyze_inline(payload, **options)

    def _transition(self, target: IngestionState) -> None:
        if not can_transition(self._state, target):
            raise InvalidStateError(f"Invalid transition {self._state.value} -> {target.value}")
        logger.debug("state transition", extra={"from": self._state.value, "to": target.value})
        self._state = target

    def _clear_error(self) -> None:
        self._error = None
        self._failure = None


__all__ = ["DraftInput", "IngestionController"]
