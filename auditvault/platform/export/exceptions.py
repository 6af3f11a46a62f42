"""Export-cycle exceptions.

Fatal errors (``ExportFailedError`` and subclasses) abort the cycle before the checkpoint
is advanced, so the next scheduled run repeats the same window.

``CheckpointCommitError`` is reported but not fatal: the archive is already written and the
next run re-exports the window (a duplicate archive, never a gap).
"""

from auditvault.core.exceptions import AuditVaultException


class ExportFailedError(AuditVaultException):
    """Raised when a cycle must stop without advancing the checkpoint.

    Usage:
        raise SourceFetchError("unable to fetch audit entries: 502 Bad Gateway")
    """

    pass


class CheckpointLookupError(ExportFailedError):
    """Raised when the checkpoint store cannot be read.

    A missing checkpoint is not an error (cold start); an unreadable store is, because
    cold-starting past an unknown position could open a gap.
    """

    pass


class SourceFetchError(ExportFailedError):
    """Raised when any page of the source query fails or is malformed."""

    pass


class ArchiveWriteError(ExportFailedError):
    """Raised when the archive object cannot be written."""

    pass


class CheckpointCommitError(AuditVaultException):
    """Raised when a new checkpoint cannot be persisted."""

    pass


class CheckpointConflictError(CheckpointCommitError):
    """Raised when a checkpoint with the same partition and sort key already exists."""

    def __init__(self, event_date: str, created_at: str):
        """Initialize with the conflicting key."""
        self.event_date = event_date
        self.created_at = created_at
        super().__init__(f"Checkpoint already exists for {event_date} at {created_at}")
