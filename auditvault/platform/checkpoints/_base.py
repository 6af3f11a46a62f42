"""Base checkpoint store."""

from abc import ABC, abstractmethod
from typing import Optional

from auditvault.core.logging import ContextualLogger
from auditvault.core.logging import logger as default_logger
from auditvault.schemas.checkpoint import Checkpoint


class BaseCheckpointStore(ABC):
    """Durable, append-only record of where the export left off.

    Checkpoints are partitioned by calendar day and ordered by creation time. There is no
    locking: at most one exporter may run per partition at a time. Two exporters racing on
    the same partition can both read the same checkpoint and export the same window twice.
    """

    def __init__(self):
        """Initialize the base checkpoint store."""
        self._logger: Optional[ContextualLogger] = None

    @property
    def logger(self):
        """Get the logger for this store, falling back to default if not set."""
        if self._logger is not None:
            return self._logger
        return default_logger

    def set_logger(self, logger: ContextualLogger) -> None:
        """Set a contextual logger for this store."""
        self._logger = logger

    @abstractmethod
    async def get_latest(self, event_date: str) -> Optional[Checkpoint]:
        """Return the most recently created checkpoint in a partition.

        Args:
            event_date: Partition key (YYYY-MM-DD)

        Returns:
            The newest checkpoint, or None when the partition is empty

        Raises:
            CheckpointLookupError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def put(self, checkpoint: Checkpoint) -> None:
        """Persist a new checkpoint without touching existing ones.

        Raises:
            CheckpointConflictError: If a checkpoint with the same key already exists
            CheckpointCommitError: If the write fails
        """
        pass
