"""Domain-specific exceptions for the spritesheet generator."""

from pathlib import Path


class DecodeError(ValueError):
    """Raised when the source animation is missing, unsupported or corrupt."""

    def __init__(self, path: Path | str, reason: str | None = None):
        message = f"Invalid animation: {path}"
        if reason:
            message = f"{message} ({reason})"
        self.path = path
        self.reason = reason
        super().__init__(message)


class EmptyInputError(ValueError):
    """Raised when the engine is handed zero frames."""


class ValidationError(ValueError):
    """Raised when user-provided settings fail validation."""


class RenderSurfaceError(RuntimeError):
    """Raised when a canvas for the composite cannot be allocated."""


class ProcessingError(RuntimeError):
    """Raised when the pipeline fails unexpectedly."""
