"""Core exceptions for auditvault.

All domain exceptions inherit from AuditVaultException.
"""


class AuditVaultException(Exception):
    """Base exception for auditvault."""

    pass


class ConfigurationError(AuditVaultException):
    """Raised when a required setting is missing or invalid.

    This is fatal at startup: no export is attempted.
    """

    pass
