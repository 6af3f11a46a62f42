"""Schemas for a single export cycle."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from auditvault.schemas.checkpoint import Checkpoint

# Opaque, source-defined event copied verbatim into the archive
AuditRecord = Dict[str, Any]


class ExportState(Enum):
    """States of one export cycle.

    IDLE -> PLANNING -> FETCHING -> WRITING -> COMMITTING -> IDLE, with FATAL reachable
    from PLANNING, FETCHING and WRITING.
    """

    IDLE = "idle"
    PLANNING = "planning"
    FETCHING = "fetching"
    WRITING = "writing"
    COMMITTING = "committing"
    FATAL = "fatal"


class ExportWindow(BaseModel):
    """Half-open time interval ``[start, end)`` covered by one export cycle."""

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(..., description="Inclusive lower bound")
    end: datetime = Field(..., description="Exclusive upper bound")

    @model_validator(mode="after")
    def _check_bounds(self) -> "ExportWindow":
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("window bounds must be timezone-aware")
        if self.start >= self.end:
            raise ValueError(f"window start {self.start} must be before end {self.end}")
        return self

    def __str__(self) -> str:
        """Render as ``start..end`` in ISO 8601."""
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


@dataclass(frozen=True)
class AuditPage:
    """One page of source results.

    ``next_cursor`` is None when the source reports no further pages.
    """

    records: List[AuditRecord]
    next_cursor: Optional[str] = None

    @property
    def is_last(self) -> bool:
        """Whether this page terminates the cursor sequence."""
        return not self.next_cursor


@dataclass
class ExportResult:
    """Outcome of a completed export cycle."""

    window: ExportWindow
    record_count: int
    location: Optional[str]
    checkpoint: "Checkpoint"
    checkpoint_committed: bool
    state: ExportState = ExportState.IDLE
    commit_error: Optional[str] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        """Summary suitable for logging or a handler response."""
        return {
            "window_start": self.window.start.isoformat(),
            "window_end": self.window.end.isoformat(),
            "record_count": self.record_count,
            "location": self.location,
            "checkpoint_committed": self.checkpoint_committed,
            "commit_error": self.commit_error,
        }
