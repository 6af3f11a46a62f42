"""Archive packaging: newline-delimited JSON, gzip, time-derived object keys."""

import gzip
import json
from datetime import datetime, tzinfo
from typing import Optional, Sequence

from auditvault.core.logging import ContextualLogger
from auditvault.core.logging import logger as default_logger
from auditvault.platform.destinations._base import BaseObjectStore
from auditvault.platform.export.exceptions import ArchiveWriteError
from auditvault.schemas.export import AuditRecord

ARCHIVE_CONTENT_TYPE = "application/x-ndjson"
ARCHIVE_CONTENT_ENCODING = "gzip"
ARCHIVE_SUFFIX = ".json.gz"


def archive_key(prefix: str, timestamp: datetime) -> str:
    """Object key for an archive written at ``timestamp``.

    ``{prefix}/{year}/{month}/{day}/{hour}/{iso timestamp with microseconds}.json.gz``,
    date segments unpadded. Two writes get distinct keys unless they share a microsecond.
    """
    return (
        f"{prefix.strip('/')}/{timestamp.year}/{timestamp.month}/{timestamp.day}/"
        f"{timestamp.hour}/{timestamp.isoformat(timespec='microseconds')}{ARCHIVE_SUFFIX}"
    )


def serialize_records(records: Sequence[AuditRecord]) -> bytes:
    """One compact JSON document per line, in input order."""
    lines = [json.dumps(record, separators=(",", ":"), default=str) for record in records]
    return ("\n".join(lines) + "\n").encode("utf-8")


def compress(data: bytes) -> bytes:
    """Gzip ``data``."""
    return gzip.compress(data)


class ArchiveWriter:
    """Packages a batch and writes it to the object store."""

    def __init__(
        self,
        store: BaseObjectStore,
        prefix: str = "Github/Audit",
        tz: Optional[tzinfo] = None,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the writer.

        Args:
            store: Destination object store
            prefix: Key prefix
            tz: Zone the key's date segments are rendered in (defaults to the timestamp's)
            logger: Contextual logger
        """
        self.store = store
        self.prefix = prefix
        self.tz = tz
        self.logger = logger or default_logger

    async def write(self, batch: Sequence[AuditRecord], timestamp: datetime) -> Optional[str]:
        """Write the batch as one archive object.

        Returns:
            Location of the archive, or None when the batch is empty (nothing is written)

        Raises:
            ArchiveWriteError: If serialization or the upload fails
        """
        if not batch:
            self.logger.info("nothing to upload")
            return None

        try:
            body = compress(serialize_records(batch))
        except (TypeError, ValueError) as e:
            raise ArchiveWriteError(f"Error occurred during marshaling: {e}") from e

        if self.tz is not None:
            timestamp = timestamp.astimezone(self.tz)
        key = archive_key(self.prefix, timestamp)

        location = await self.store.put_object(
            key,
            body,
            content_type=ARCHIVE_CONTENT_TYPE,
            content_encoding=ARCHIVE_CONTENT_ENCODING,
        )
        self.logger.info(f"successfully uploaded {len(batch)} records to {location}")
        return location
