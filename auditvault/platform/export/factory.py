"""Build an ExportContext from settings.

Usage:
    settings = get_settings()
    async with build_export_context(settings) as context:
        result = await ExportOrchestrator(context).run()
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import aioboto3
import httpx

from auditvault.core.config import Settings
from auditvault.core.logging import ContextualLogger
from auditvault.core.logging import logger as default_logger
from auditvault.platform.checkpoints import (
    BaseCheckpointStore,
    DynamoDBCheckpointStore,
    FilesystemCheckpointStore,
)
from auditvault.platform.destinations import (
    BaseObjectStore,
    FilesystemObjectStore,
    S3ObjectStore,
)
from auditvault.platform.export.archive import ArchiveWriter
from auditvault.platform.export.context import ExportContext
from auditvault.platform.export.fetcher import PaginatedFetcher
from auditvault.platform.export.window import WindowPlanner
from auditvault.platform.sources import GitHubAuditLogSource


def create_checkpoint_store(
    settings: Settings, session: aioboto3.Session, logger: ContextualLogger
) -> BaseCheckpointStore:
    """Checkpoint store selected by CHECKPOINT_BACKEND."""
    if settings.CHECKPOINT_BACKEND == "filesystem":
        return FilesystemCheckpointStore(Path(settings.LOCAL_STORAGE_PATH), logger=logger)
    return DynamoDBCheckpointStore(
        table_name=settings.BOOKMARK_TABLE,
        session=session,
        region=settings.AWS_REGION,
        endpoint_url=settings.AWS_ENDPOINT_URL,
        logger=logger,
    )


def create_object_store(
    settings: Settings, session: aioboto3.Session, logger: ContextualLogger
) -> BaseObjectStore:
    """Object store selected by ARCHIVE_BACKEND."""
    if settings.ARCHIVE_BACKEND == "filesystem":
        return FilesystemObjectStore(Path(settings.LOCAL_STORAGE_PATH), logger=logger)
    return S3ObjectStore(
        bucket_name=settings.BUCKET_NAME,
        session=session,
        region=settings.AWS_REGION,
        endpoint_url=settings.AWS_ENDPOINT_URL,
        logger=logger,
    )


@asynccontextmanager
async def build_export_context(
    settings: Settings,
    logger: Optional[ContextualLogger] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> AsyncIterator[ExportContext]:
    """Construct every collaborator once and yield the context.

    The HTTP client is closed on exit unless it was supplied by the caller.
    """
    logger = (logger or default_logger).with_context(organization=settings.GITHUB_ORG)
    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    session = aioboto3.Session()

    try:
        source = GitHubAuditLogSource(
            client=client,
            organization=settings.GITHUB_ORG,
            token=settings.GITHUB_TOKEN,
            api_url=settings.GITHUB_API_URL,
            logger=logger,
        )
        yield ExportContext(
            organization=settings.GITHUB_ORG,
            planner=WindowPlanner(settings.window_duration),
            fetcher=PaginatedFetcher(
                source,
                include=settings.AUDIT_LOG_OPTION_INCLUDE,
                order=settings.AUDIT_LOG_OPTION_ORDER,
                per_page=settings.AUDIT_LOG_OPTION_PER_PAGE,
                extra_phrase=settings.AUDIT_LOG_OPTION_PHRASE,
                logger=logger,
            ),
            writer=ArchiveWriter(
                create_object_store(settings, session, logger),
                prefix=settings.FOLDER_PREFIX,
                tz=settings.tz,
                logger=logger,
            ),
            checkpoint_store=create_checkpoint_store(settings, session, logger),
            tz=settings.tz,
            logger=logger,
            lookback_days=settings.CHECKPOINT_LOOKBACK_DAYS,
        )
    finally:
        if owns_client:
            await client.aclose()
