"""Export context."""

from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Callable

from auditvault.core.logging import ContextualLogger
from auditvault.platform.checkpoints._base import BaseCheckpointStore
from auditvault.platform.export.archive import ArchiveWriter
from auditvault.platform.export.fetcher import PaginatedFetcher
from auditvault.platform.export.window import WindowPlanner


def utc_now() -> datetime:
    """Current time, timezone-aware."""
    return datetime.now(timezone.utc)


@dataclass
class ExportContext:
    """Everything one export cycle needs, built once at startup.

    Attributes:
        organization: Organization whose audit log is exported
        planner: Window planner
        fetcher: Paginated fetcher bound to the source
        writer: Archive writer bound to the object store
        checkpoint_store: Checkpoint store
        tz: Zone for partition dates
        logger: Contextual logger
        clock: Returns the current time; injected for tests
        lookback_days: Earlier partitions consulted before a cold start
    """

    organization: str
    planner: WindowPlanner
    fetcher: PaginatedFetcher
    writer: ArchiveWriter
    checkpoint_store: BaseCheckpointStore
    tz: tzinfo
    logger: ContextualLogger
    clock: Callable[[], datetime] = field(default=utc_now)
    lookback_days: int = 0

    def now(self) -> datetime:
        """Current time in the configured zone."""
        return self.clock().astimezone(self.tz)
