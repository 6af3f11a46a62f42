"""Base audit source."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from auditvault.core.logging import ContextualLogger
from auditvault.core.logging import logger as default_logger
from auditvault.schemas.export import AuditPage


@dataclass(frozen=True)
class AuditQuery:
    """Query passed through to the source unchanged.

    Attributes:
        phrase: Search phrase, including the time-range qualifiers
        include: Event category to include (e.g., "web", "git", "all")
        order: Sort order, "asc" or "desc"
        per_page: Requested page size; a hint, not a termination condition
    """

    phrase: str
    include: str = "web"
    order: str = "desc"
    per_page: int = 30


class BaseAuditSource(ABC):
    """A time-ordered, filterable, cursor-paginated audit event API."""

    def __init__(self):
        """Initialize the base source."""
        self._logger: Optional[ContextualLogger] = None

    @property
    def logger(self):
        """Get the logger for this source, falling back to default if not set."""
        if self._logger is not None:
            return self._logger
        return default_logger

    def set_logger(self, logger: ContextualLogger) -> None:
        """Set a contextual logger for this source."""
        self._logger = logger

    @abstractmethod
    async def get_page(self, query: AuditQuery, cursor: Optional[str] = None) -> AuditPage:
        """Fetch one page.

        Args:
            query: Query parameters
            cursor: Continuation cursor from the previous page, None for the first page

        Returns:
            The page's records and the next cursor (None when exhausted)

        Raises:
            SourceFetchError: If the request fails or the response is malformed
        """
        pass
