"""Error types for aarbind.

Every failure raised by the packaging pipeline derives from BindError. The
pipeline fills in ``stage`` as the error leaves a stage so the CLI can report
where the build stopped without losing the original error type.
"""

from typing import Optional, Sequence


class BindError(Exception):
    """Base class for all packaging pipeline errors."""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class ConfigurationError(BindError):
    """Raised for missing or invalid build configuration."""
    pass


class NotFoundError(ConfigurationError):
    """Raised when no installed SDK platform satisfies the minimum version."""

    def __init__(self, message: str, min_version: int, stage: Optional[str] = None):
        super().__init__(message, stage)
        self.min_version = min_version


class ValidationError(ConfigurationError):
    """Raised for structurally invalid requests (bad suffix, no architectures)."""
    pass


class ToolInvocationError(BindError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        command: Sequence[str] = (),
        returncode: Optional[int] = None,
        stderr: str = "",
        stage: Optional[str] = None,
    ):
        super().__init__(message, stage)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        text = super().__str__()
        if self.stderr:
            text += f"\n{self.stderr.rstrip()}"
        return text


class ConflictError(BindError):
    """Raised when two source packages contribute the same asset path."""

    def __init__(self, path: str, package: str, original: str, stage: Optional[str] = None):
        super().__init__(
            f"package {package} asset name conflict: {path} already added from package {original}",
            stage,
        )
        self.path = path
        self.package = package
        self.original = original


class PackagingIOError(BindError):
    """Raised for unreadable inputs or unwritable outputs."""

    def __init__(self, message: str, path=None, stage: Optional[str] = None):
        super().__init__(message, stage)
        self.path = path
