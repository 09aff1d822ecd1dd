"""Typed stage events recorded while one import is reconciled."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType


@dataclass(frozen=True)
class ReconciliationStageEvent:
    """One completed pipeline stage.

    Attributes:
        stage: Stage name, e.g. `normalize` or `match`.
        status: Stage status marker.
        at_utc: Completion timestamp in UTC.
        duration_ms: Wall-clock stage duration in milliseconds, when measured.
        details: Read-only structured stage counters.
    """

    stage: str
    status: str
    at_utc: datetime
    duration_ms: float | None = None
    details: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    def domain_to_payload(self) -> dict[str, object]:
        """Return a JSON-serializable representation of the event."""

        payload: dict[str, object] = {
            "stage": self.stage,
            "status": self.status,
            "at_utc": self.at_utc.isoformat(),
        }
        if self.duration_ms is not None:
            payload["duration_ms"] = round(self.duration_ms, 3)
        if self.details:
            payload["details"] = dict(self.details)
        return payload


def domain_build_stage_event(
    stage: str,
    status: str,
    details: Mapping[str, object] | None = None,
    duration_ms: float | None = None,
) -> ReconciliationStageEvent:
    """Build one stage event stamped with the current UTC time.

    Args:
        stage: Stage name.
        status: Stage status marker.
        details: Optional structured counters, copied into a read-only mapping.
        duration_ms: Optional measured stage duration.

    Returns:
        ReconciliationStageEvent: Immutable stage event.

    Raises:
        ValueError: Raised when stage or status is blank, or duration is negative.
    """

    if not stage.strip():
        raise ValueError("stage must not be blank")
    if not status.strip():
        raise ValueError("status must not be blank")
    if duration_ms is not None and duration_ms < 0:
        raise ValueError("duration_ms must not be negative")

    return ReconciliationStageEvent(
        stage=stage.strip(),
        status=status.strip(),
        at_utc=datetime.now(timezone.utc),
        duration_ms=duration_ms,
        details=MappingProxyType(dict(details or {})),
    )
