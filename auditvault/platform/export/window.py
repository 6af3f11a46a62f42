"""Window planning."""

from datetime import datetime, timedelta
from typing import Optional

from auditvault.schemas.checkpoint import Checkpoint
from auditvault.schemas.export import ExportWindow

DEFAULT_WINDOW_DURATION = timedelta(hours=1)


class WindowPlanner:
    """Derives the next export window from the last checkpoint.

    Windows tile: a window planned from a checkpoint starts exactly where the checkpoint's
    window ended, whatever the wall-clock time. Without a checkpoint the window starts at
    ``now``; history before the first run is never backfilled.
    """

    def __init__(self, duration: timedelta = DEFAULT_WINDOW_DURATION):
        """Initialize with a fixed window duration."""
        if duration <= timedelta(0):
            raise ValueError(f"window duration must be positive, got {duration}")
        self.duration = duration

    def next_window(self, previous: Optional[Checkpoint], now: datetime) -> ExportWindow:
        """Plan the window following ``previous`` (or starting at ``now`` on cold start)."""
        start = previous.window_end if previous is not None else now
        return ExportWindow(start=start, end=start + self.duration)
