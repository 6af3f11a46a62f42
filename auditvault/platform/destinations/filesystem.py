"""Filesystem object store for local development.

Objects land at ``{base_path}/archives/{key}``.
"""

import os
from pathlib import Path
from typing import Optional, Union

from auditvault.core.logging import ContextualLogger
from auditvault.platform.destinations._base import BaseObjectStore
from auditvault.platform.export.exceptions import ArchiveWriteError


class FilesystemObjectStore(BaseObjectStore):
    """Object store that writes archives to a local directory."""

    def __init__(self, base_path: Union[str, Path], logger: Optional[ContextualLogger] = None):
        """Initialize the store under ``base_path/archives``."""
        super().__init__()
        self.base_path = Path(base_path) / "archives"
        if logger:
            self.set_logger(logger)

    def _resolve(self, key: str) -> Path:
        return self.base_path / key.replace("/", os.sep)

    async def put_object(
        self,
        key: str,
        body: bytes,
        content_type: str = "application/octet-stream",
        content_encoding: Optional[str] = None,
    ) -> str:
        """Write the object, refusing to replace an existing file."""
        full_path = self._resolve(key)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            with open(full_path, "xb") as f:
                f.write(body)
        except FileExistsError as e:
            raise ArchiveWriteError(f"Object already exists at {key}") from e
        except OSError as e:
            raise ArchiveWriteError(f"Failed to write object to {key}: {e}") from e

        self.logger.debug(f"Wrote {len(body)} bytes to {full_path}")
        return full_path.resolve().as_uri()
