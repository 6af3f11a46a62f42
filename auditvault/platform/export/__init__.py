"""Incremental, checkpointed export pipeline."""

from .archive import ArchiveWriter
from .context import ExportContext
from .exceptions import (
    ArchiveWriteError,
    CheckpointCommitError,
    CheckpointConflictError,
    CheckpointLookupError,
    ExportFailedError,
    SourceFetchError,
)
from .fetcher import PaginatedFetcher
from .orchestrator import ExportOrchestrator
from .window import WindowPlanner

__all__ = [
    "ArchiveWriteError",
    "ArchiveWriter",
    "CheckpointCommitError",
    "CheckpointConflictError",
    "CheckpointLookupError",
    "ExportContext",
    "ExportFailedError",
    "ExportOrchestrator",
    "PaginatedFetcher",
    "SourceFetchError",
    "WindowPlanner",
]
