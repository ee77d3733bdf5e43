"""
Error types for ccsetup lifecycle operations.

Only fatal conditions are exceptions. Per-item copy/delete problems are
collected as ItemFailure records on the operation result instead.
"""


class SetupError(Exception):
    """Base class for ccsetup errors."""


class FatalPreconditionError(SetupError):
    """A precondition failed and nothing at the target was changed."""


class BackupError(FatalPreconditionError):
    """A required backup snapshot could not be created or verified."""

    def __init__(self, message: str, snapshot=None):
        super().__init__(message)
        self.snapshot = snapshot
