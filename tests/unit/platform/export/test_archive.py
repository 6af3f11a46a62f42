"""Tests for ArchiveWriter."""

import gzip
import json
from datetime import datetime, timedelta, timezone

import pytest

from auditvault.platform.export.archive import ArchiveWriter, archive_key, serialize_records
from auditvault.platform.export.exceptions import ArchiveWriteError

WRITE_TIME = datetime(2024, 5, 1, 9, 5, 7, 123456, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_empty_batch_writes_nothing(object_store):
    """An empty window performs zero store writes and still reports success."""
    writer = ArchiveWriter(object_store)

    location = await writer.write([], WRITE_TIME)

    assert location is None
    assert object_store.put_calls == []


@pytest.mark.asyncio
async def test_archive_is_gzipped_ndjson_in_input_order(object_store):
    """Decompressed output has one JSON record per line, same count and order."""
    batch = [
        {"action": "repo.create", "actor": "octocat", "@timestamp": 3},
        {"action": "repo.destroy", "actor": "hubot", "@timestamp": 2},
        {"action": "org.invite_member", "actor": "monalisa", "data": {"nested": [1, 2]}},
    ]
    writer = ArchiveWriter(object_store)

    location = await writer.write(batch, WRITE_TIME)

    (key,) = object_store.put_calls
    assert location == f"memory://{key}"
    lines = gzip.decompress(object_store.objects[key]).decode("utf-8").splitlines()
    assert [json.loads(line) for line in lines] == batch


@pytest.mark.asyncio
async def test_key_derived_from_write_time(object_store):
    """Key is prefix/year/month/day/hour/timestamp.json.gz."""
    writer = ArchiveWriter(object_store, prefix="Github/Audit")

    await writer.write([{"action": "repo.create"}], WRITE_TIME)

    assert object_store.put_calls == [
        "Github/Audit/2024/5/1/9/2024-05-01T09:05:07.123456+00:00.json.gz"
    ]


@pytest.mark.asyncio
async def test_key_uses_configured_time_zone(object_store):
    """Date segments follow the configured zone, not the timestamp's."""
    plus_ten = timezone(timedelta(hours=10))
    writer = ArchiveWriter(object_store, prefix="audit", tz=plus_ten)

    await writer.write([{"action": "repo.create"}], WRITE_TIME)

    assert object_store.put_calls[0].startswith("audit/2024/5/1/19/2024-05-01T19:05:07.123456")


def test_distinct_write_times_get_distinct_keys():
    """Retried writes a microsecond apart do not collide."""
    later = WRITE_TIME + timedelta(microseconds=1)

    assert archive_key("p", WRITE_TIME) != archive_key("p", later)


def test_serialize_records_is_compact():
    """Records are rendered without insignificant whitespace."""
    assert serialize_records([{"a": 1, "b": [1, 2]}]) == b'{"a":1,"b":[1,2]}\n'


@pytest.mark.asyncio
async def test_store_failure_propagates(object_store_factory):
    """An upload failure surfaces as ArchiveWriteError."""
    writer = ArchiveWriter(object_store_factory(fail=True))

    with pytest.raises(ArchiveWriteError):
        await writer.write([{"action": "repo.create"}], WRITE_TIME)
