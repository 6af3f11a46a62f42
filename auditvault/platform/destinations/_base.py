"""Base object store."""

from abc import ABC, abstractmethod
from typing import Optional

from auditvault.core.logging import ContextualLogger
from auditvault.core.logging import logger as default_logger


class BaseObjectStore(ABC):
    """Write-once blob storage addressed by hierarchical keys."""

    def __init__(self):
        """Initialize the base object store."""
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
    async def put_object(
        self,
        key: str,
        body: bytes,
        content_type: str = "application/octet-stream",
        content_encoding: Optional[str] = None,
    ) -> str:
        """Upload ``body`` under ``key``.

        Args:
            key: Hierarchical key (e.g., "Github/Audit/2024/5/1/10/...json.gz")
            body: Object content
            content_type: MIME type recorded with the object
            content_encoding: Optional content encoding (e.g., "gzip")

        Returns:
            Location identifier of the stored object

        Raises:
            ArchiveWriteError: If the upload fails
        """
        pass
