"""Tests for FilesystemObjectStore."""

import tempfile
from pathlib import Path

import pytest

from auditvault.platform.destinations.filesystem import FilesystemObjectStore
from auditvault.platform.export.exceptions import ArchiveWriteError


@pytest.fixture
def temp_dir():
    """Create a temporary directory for archives."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.mark.asyncio
async def test_writes_object_under_key(temp_dir):
    """Key segments become directories."""
    store = FilesystemObjectStore(temp_dir)

    location = await store.put_object("Github/Audit/2024/5/1/10/a.json.gz", b"data")

    path = Path(temp_dir) / "archives" / "Github" / "Audit" / "2024" / "5" / "1" / "10"
    assert (path / "a.json.gz").read_bytes() == b"data"
    assert location.startswith("file://")


@pytest.mark.asyncio
async def test_existing_object_is_not_replaced(temp_dir):
    """Objects are write-once."""
    store = FilesystemObjectStore(temp_dir)
    await store.put_object("k/a.json.gz", b"first")

    with pytest.raises(ArchiveWriteError):
        await store.put_object("k/a.json.gz", b"second")

    assert (Path(temp_dir) / "archives" / "k" / "a.json.gz").read_bytes() == b"first"
