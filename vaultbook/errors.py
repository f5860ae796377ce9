"""Exceptions raised by vaultbook passes.

Per-file read/write failures are plain ``OSError`` and are handled inside each
pass. The classes below are the failures that stop a stage.
"""


class VaultbookError(Exception):
    """Base class for vaultbook errors."""


class ConfigurationError(VaultbookError):
    """The vault layout is unusable; raised before anything is written."""


class RotationError(VaultbookError):
    """Backup rotation could not make progress."""

    def __init__(self, message: str, failed: list[str] | None = None, report=None) -> None:
        super().__init__(message)
        self.failed = failed or []
        # Partial RotationReport of the stalled pass
        self.report = report
