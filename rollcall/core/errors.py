"""
Exceptions raised by the rollcall core.

Only configuration, listing and template problems escape an invocation.
Per-record failures are reported as text in the run summary instead.
"""

from typing import Optional


class RollcallError(Exception):
    """Base class for rollcall failures."""
    pass


class ConfigError(RollcallError):
    """Raised when required settings are missing or invalid."""

    def __init__(self, issues):
        self.issues = list(issues)
        super().__init__(f"Rollcall configuration invalid: {self.issues}")


class StorageError(RollcallError):
    """Raised when the record repository answers with a non-success status."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class TemplateError(RollcallError):
    """Raised when an email template cannot be fetched or parsed."""
    pass


class EscalationError(RollcallError):
    """Raised when a record cannot be escalated any further."""
    pass
