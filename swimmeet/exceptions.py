"""Error kinds raised while scoring a meet."""

from __future__ import annotations

from dataclasses import dataclass


class MeetComputationError(ValueError):
    """Base class for errors raised by the scoring engine."""


class InvalidTimeFormat(MeetComputationError):
    """A time string could not be parsed into seconds."""


class MalformedConfiguration(MeetComputationError):
    """A serialized meet field (JSON list or map) could not be parsed."""

    def __init__(self, field: str, detail: str) -> None:
        self.field = field
        self.detail = detail
        super().__init__(f"{field}: {detail}")


class InconsistentRelayComposition(MeetComputationError):
    """A relay entry's members do not fit the event or the team roster."""


class UnknownEventCategory(MeetComputationError):
    """An event type matched none of the individual/diving/relay categories."""


@dataclass(frozen=True)
class ComputationWarning:
    """A per-record problem recorded alongside partial results."""

    kind: str
    message: str
    record_id: int | None = None

    @classmethod
    def from_error(cls, error: Exception, record_id: int | None = None) -> "ComputationWarning":
        return cls(kind=type(error).__name__, message=str(error), record_id=record_id)
