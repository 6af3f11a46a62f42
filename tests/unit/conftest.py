"""Unit test conftest: environment and in-memory collaborators."""

import os
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

import pytest

# Set minimal required environment variables before importing any auditvault modules
os.environ.setdefault("GITHUB_TOKEN", "ghp_test_token")
os.environ.setdefault("GITHUB_ORG", "acme")
os.environ.setdefault("BUCKET_NAME", "audit-archive")
os.environ.setdefault("BOOKMARK_TABLE", "audit-bookmarks")

from auditvault.core.logging import logger  # noqa: E402
from auditvault.platform.checkpoints._base import BaseCheckpointStore  # noqa: E402
from auditvault.platform.destinations._base import BaseObjectStore  # noqa: E402
from auditvault.platform.export.archive import ArchiveWriter  # noqa: E402
from auditvault.platform.export.context import ExportContext  # noqa: E402
from auditvault.platform.export.exceptions import (  # noqa: E402
    ArchiveWriteError,
    CheckpointCommitError,
)
from auditvault.platform.export.fetcher import PaginatedFetcher  # noqa: E402
from auditvault.platform.export.window import WindowPlanner  # noqa: E402
from auditvault.platform.sources._base import AuditQuery, BaseAuditSource  # noqa: E402
from auditvault.schemas.checkpoint import Checkpoint  # noqa: E402
from auditvault.schemas.export import AuditPage  # noqa: E402


class StubSource(BaseAuditSource):
    """Source that replays a scripted list of pages (or exceptions to raise)."""

    def __init__(self, pages: List[Union[AuditPage, Exception]]):
        super().__init__()
        self.pages = list(pages)
        self.calls: List[Dict[str, Optional[str]]] = []

    async def get_page(self, query: AuditQuery, cursor: Optional[str] = None) -> AuditPage:
        self.calls.append({"phrase": query.phrase, "cursor": cursor})
        item = self.pages.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class RecordingObjectStore(BaseObjectStore):
    """Object store that keeps uploads in memory."""

    def __init__(self, fail: bool = False):
        super().__init__()
        self.fail = fail
        self.objects: Dict[str, bytes] = {}
        self.put_calls: List[str] = []

    async def put_object(self, key, body, content_type="application/octet-stream",
                         content_encoding=None) -> str:
        self.put_calls.append(key)
        if self.fail:
            raise ArchiveWriteError("failed to upload: simulated outage")
        self.objects[key] = body
        return f"memory://{key}"


class InMemoryCheckpointStore(BaseCheckpointStore):
    """Append-only checkpoint store kept in a dict of partitions."""

    def __init__(self, fail_put: bool = False):
        super().__init__()
        self.fail_put = fail_put
        self.partitions: Dict[str, List[Checkpoint]] = {}
        self.get_calls: List[str] = []
        self.put_calls: List[Checkpoint] = []

    async def get_latest(self, event_date: str) -> Optional[Checkpoint]:
        self.get_calls.append(event_date)
        checkpoints = self.partitions.get(event_date, [])
        return max(checkpoints, key=lambda c: c.created_at) if checkpoints else None

    async def put(self, checkpoint: Checkpoint) -> None:
        self.put_calls.append(checkpoint)
        if self.fail_put:
            raise CheckpointCommitError("could not insert next checkpoint: throttled")
        self.partitions.setdefault(checkpoint.event_date, []).append(checkpoint)

    @property
    def history(self) -> List[Checkpoint]:
        return sorted(
            (c for cs in self.partitions.values() for c in cs), key=lambda c: c.created_at
        )


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta) -> None:
        self.current = self.current + delta


def make_context(
    source: BaseAuditSource,
    object_store: BaseObjectStore,
    checkpoint_store: BaseCheckpointStore,
    clock: ManualClock,
    lookback_days: int = 0,
) -> ExportContext:
    """Wire an ExportContext around the given collaborators (UTC, one-hour windows)."""
    return ExportContext(
        organization="acme",
        planner=WindowPlanner(),
        fetcher=PaginatedFetcher(source),
        writer=ArchiveWriter(object_store, prefix="Github/Audit", tz=timezone.utc),
        checkpoint_store=checkpoint_store,
        tz=timezone.utc,
        logger=logger,
        clock=clock,
        lookback_days=lookback_days,
    )


@pytest.fixture
def clock():
    """Clock fixed at 2024-05-01 10:30 UTC."""
    return ManualClock(datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc))


@pytest.fixture
def object_store():
    """Recording object store."""
    return RecordingObjectStore()


@pytest.fixture
def checkpoint_store():
    """In-memory checkpoint store."""
    return InMemoryCheckpointStore()


@pytest.fixture
def stub_source_factory():
    """Build a StubSource from a list of pages."""
    return StubSource


@pytest.fixture
def context_factory():
    """Build an ExportContext from collaborators."""
    return make_context


@pytest.fixture
def object_store_factory():
    """Build a RecordingObjectStore (``fail=True`` makes every upload fail)."""
    return RecordingObjectStore


@pytest.fixture
def checkpoint_store_factory():
    """Build an InMemoryCheckpointStore (``fail_put=True`` makes every put fail)."""
    return InMemoryCheckpointStore
