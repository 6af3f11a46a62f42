"""Exhaustive, cursor-following retrieval of one export window."""

from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from auditvault.core.logging import ContextualLogger
from auditvault.core.logging import logger as default_logger
from auditvault.platform.export.exceptions import SourceFetchError
from auditvault.platform.sources._base import AuditQuery, BaseAuditSource
from auditvault.schemas.export import AuditPage, AuditRecord, ExportWindow

PHRASE_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S+00:00"


def format_phrase_timestamp(value: datetime) -> str:
    """Render a bound for the query phrase: UTC, second precision, explicit offset."""
    return value.astimezone(timezone.utc).strftime(PHRASE_TIMESTAMP_FORMAT)


def build_search_phrase(window: ExportWindow, extra_phrase: str = "") -> str:
    """Build the query phrase selecting ``created >= start AND created < end``.

    Both bounds are floored to the second, so consecutive windows still share a boundary.
    """
    phrase = (
        f"created:>={format_phrase_timestamp(window.start)} "
        f"created:<{format_phrase_timestamp(window.end)}"
    )
    if extra_phrase:
        phrase = f"{phrase} {extra_phrase.strip()}"
    return phrase


class PaginatedFetcher:
    """Retrieves every record in a window by following continuation cursors.

    Termination depends only on the source returning no cursor. Page size is passed
    through as a hint; a short page does not mean the results are exhausted.
    """

    def __init__(
        self,
        source: BaseAuditSource,
        include: str = "web",
        order: str = "desc",
        per_page: int = 30,
        extra_phrase: str = "",
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the fetcher.

        Args:
            source: Paginated audit source
            include: Event category passed to the source
            order: Sort order passed to the source; results are never re-sorted
            per_page: Page size hint
            extra_phrase: Static filter appended to the time-range phrase
            logger: Contextual logger
        """
        self.source = source
        self.include = include
        self.order = order
        self.per_page = per_page
        self.extra_phrase = extra_phrase
        self.logger = logger or default_logger

    def build_query(self, window: ExportWindow) -> AuditQuery:
        """Query for a window with the configured passthrough options."""
        return AuditQuery(
            phrase=build_search_phrase(window, self.extra_phrase),
            include=self.include,
            order=self.order,
            per_page=self.per_page,
        )

    async def iter_pages(self, window: ExportWindow) -> AsyncIterator[AuditPage]:
        """Yield pages until the source reports no further cursor.

        The sequence is finite and cannot be restarted; call again for a fresh pass.

        Raises:
            SourceFetchError: On any request failure, or if the source hands back a
                cursor it already gave
        """
        query = self.build_query(window)
        self.logger.info(
            f"phrase: {query.phrase}, include: {query.include}, "
            f"order: {query.order}, per_page: {query.per_page}"
        )

        cursor: Optional[str] = None
        seen: set[str] = set()
        page_number = 1
        while True:
            page = await self.source.get_page(query, cursor)
            self.logger.debug(f"Page {page_number}: {len(page.records)} records")
            yield page

            if page.is_last:
                break
            if page.next_cursor in seen:
                raise SourceFetchError(
                    f"source returned cursor {page.next_cursor!r} twice, on page {page_number}"
                )
            seen.add(page.next_cursor)
            cursor = page.next_cursor
            page_number += 1

    async def fetch_all(self, window: ExportWindow) -> list[AuditRecord]:
        """Return every record in the window, pages concatenated in source order.

        Either the whole window is returned or SourceFetchError is raised; a partial
        batch is never returned.
        """
        batch: list[AuditRecord] = []
        pages = 0
        async for page in self.iter_pages(window):
            batch.extend(page.records)
            pages += 1

        self.logger.info(f"{len(batch)} audit entries fetched across {pages} page(s)")
        return batch
