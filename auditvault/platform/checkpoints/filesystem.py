"""Filesystem checkpoint store for local development.

One JSON-lines file per partition: ``{base_path}/checkpoints/{event_date}.jsonl``.
Lines are only ever appended.
"""

import json
from pathlib import Path
from typing import List, Optional, Union

from auditvault.core.logging import ContextualLogger
from auditvault.platform.checkpoints._base import BaseCheckpointStore
from auditvault.platform.export.exceptions import (
    CheckpointCommitError,
    CheckpointConflictError,
    CheckpointLookupError,
)
from auditvault.schemas.checkpoint import Checkpoint


class FilesystemCheckpointStore(BaseCheckpointStore):
    """Append-only JSON-lines checkpoint store."""

    def __init__(self, base_path: Union[str, Path], logger: Optional[ContextualLogger] = None):
        """Initialize the store under ``base_path/checkpoints``."""
        super().__init__()
        self.base_path = Path(base_path) / "checkpoints"
        if logger:
            self.set_logger(logger)

    def _partition_file(self, event_date: str) -> Path:
        return self.base_path / f"{event_date}.jsonl"

    def _read_partition(self, event_date: str) -> List[Checkpoint]:
        path = self._partition_file(event_date)
        if not path.exists():
            return []
        with open(path, "r", encoding="utf-8") as f:
            return [Checkpoint.from_record(json.loads(line)) for line in f if line.strip()]

    async def get_latest(self, event_date: str) -> Optional[Checkpoint]:
        """Return the checkpoint with the greatest creation time in the partition."""
        try:
            checkpoints = self._read_partition(event_date)
        except (OSError, ValueError) as e:
            raise CheckpointLookupError(f"Failed to read checkpoints for {event_date}: {e}") from e

        if not checkpoints:
            self.logger.info(f"No checkpoint found for given date: {event_date}")
            return None
        return max(checkpoints, key=lambda c: c.created_at)

    async def put(self, checkpoint: Checkpoint) -> None:
        """Append the checkpoint to its partition file."""
        record = checkpoint.to_record()
        try:
            existing = self._read_partition(checkpoint.event_date)
        except (OSError, ValueError) as e:
            raise CheckpointCommitError(f"Failed to read partition before insert: {e}") from e

        if any(c.created_at == checkpoint.created_at for c in existing):
            raise CheckpointConflictError(record["EventDate"], record["CreatedAt"])

        path = self._partition_file(checkpoint.event_date)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(json.dumps(record) + "\n")
        except OSError as e:
            raise CheckpointCommitError(f"Failed to write checkpoint to {path}: {e}") from e
