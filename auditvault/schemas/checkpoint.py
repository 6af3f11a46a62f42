"""Checkpoint (bookmark) schema.

A checkpoint marks the end of the last successfully exported window. Checkpoints are
append-only: one new record per completed cycle, never updated, never deleted. The newest
record in a partition is the current position.
"""

from datetime import datetime, timezone, tzinfo
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from auditvault.schemas.export import ExportWindow

EVENT_DATE_FORMAT = "%Y-%m-%d"


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as fixed-width UTC ISO 8601 with microseconds.

    Fixed width keeps string sort keys in chronological order.
    """
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class Checkpoint(BaseModel):
    """Exported-through boundary for the audit log.

    Stored attribute names (``EventDate``, ``CreatedAt``, ``From``, ``To``) are the
    bookmark table's column names; Python code uses the field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event_date: str = Field(
        ..., alias="EventDate", description="Partition key, YYYY-MM-DD in the configured zone"
    )
    created_at: datetime = Field(..., alias="CreatedAt", description="Sort key")
    window_start: datetime = Field(..., alias="From", description="Inclusive window start")
    window_end: datetime = Field(..., alias="To", description="Exclusive window end")

    @field_serializer("created_at", "window_start", "window_end")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    @classmethod
    def for_window(cls, window: ExportWindow, created_at: datetime, tz: tzinfo) -> "Checkpoint":
        """Build the checkpoint that records ``window`` as exported."""
        return cls(
            event_date=partition_for(created_at, tz),
            created_at=created_at,
            window_start=window.start,
            window_end=window.end,
        )

    @property
    def window(self) -> ExportWindow:
        """The exported window as a value."""
        return ExportWindow(start=self.window_start, end=self.window_end)

    def to_record(self) -> Dict[str, str]:
        """Serialize with stored attribute names."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Checkpoint":
        """Deserialize from stored attribute names."""
        return cls.model_validate(record)


def partition_for(moment: datetime, tz: tzinfo) -> str:
    """Partition key (calendar day in ``tz``) for a moment in time."""
    return moment.astimezone(tz).strftime(EVENT_DATE_FORMAT)
