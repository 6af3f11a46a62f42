"""Audit event sources."""

from ._base import AuditQuery, BaseAuditSource
from .github import GitHubAuditLogSource

__all__ = ["AuditQuery", "BaseAuditSource", "GitHubAuditLogSource"]
