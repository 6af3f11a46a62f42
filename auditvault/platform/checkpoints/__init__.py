"""Checkpoint stores."""

from ._base import BaseCheckpointStore
from .dynamodb import DynamoDBCheckpointStore
from .filesystem import FilesystemCheckpointStore

__all__ = ["BaseCheckpointStore", "DynamoDBCheckpointStore", "FilesystemCheckpointStore"]
