"""Object stores that receive archives."""

from ._base import BaseObjectStore
from .filesystem import FilesystemObjectStore
from .s3 import S3ObjectStore

__all__ = ["BaseObjectStore", "FilesystemObjectStore", "S3ObjectStore"]
