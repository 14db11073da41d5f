from __future__ import annotations
from enum import Enum
from typing import Dict, FrozenSet


class IngestionState(str, Enum):
    IDLE = "IDLE"
    SUBMITTING = "SUBMITTING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"


class InputMode(str, Enum):
    FILE = "file"
    URL = "url"
    INLINE = "inline"


# Allowed transitions; anything else is a programming error in the caller.
TRANSITIONS: Dict[IngestionState, FrozenSet[IngestionState]] = {
    IngestionState.IDLE: frozenset({IngestionState.SUBMITTING}),
    IngestionState.SUBMITTING: frozenset({IngestionState.COMPLETE, IngestionState.FAILED}),
    IngestionState.COMPLETE: frozenset({IngestionState.IDLE}),
    IngestionState.FAILED: frozenset({IngestionState.IDLE}),
}


def can_transition(current: IngestionState, target: IngestionState) -> bool:
    return target in TRANSITIONS.get(current, frozenset())
