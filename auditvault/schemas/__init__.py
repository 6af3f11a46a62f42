"""Schemas for auditvault."""

from .checkpoint import Checkpoint, format_timestamp
from .export import AuditPage, AuditRecord, ExportResult, ExportState, ExportWindow

__all__ = [
    "AuditPage",
    "AuditRecord",
    "Checkpoint",
    "ExportResult",
    "ExportState",
    "ExportWindow",
    "format_timestamp",
]
