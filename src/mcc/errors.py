"""Domain exceptions for mcc.

Every expected failure of the profile store maps to one of these. The CLI
catches ``MccError`` at the command boundary and reports the message.
"""

from __future__ import annotations


class MccError(RuntimeError):
    """Base exception for all mcc failures."""


class InvalidNameError(MccError):
    """Raised when a profile name contains reserved characters."""


class AlreadyExistsError(MccError):
    """Raised when creating a profile that is already on disk."""


class NotFoundError(MccError):
    """Raised when a named profile does not exist."""


class ForbiddenError(MccError):
    """Raised when an operation targets the protected default profile."""


class InUseError(MccError):
    """Raised when deleting the currently active profile."""


class SourceMissingError(MccError):
    """Raised when the live configuration directory has nothing to sync."""


class ProfileIOError(MccError):
    """Raised when an underlying read, write, stat or link call fails."""


class NotSupportedError(MccError):
    """Raised for provider operations that do not apply to a profile."""


class LaunchError(MccError):
    """Raised when the claude executable cannot be started."""
