"""Error taxonomy for a probe run.

Pipeline stage failures are fatal: they carry the name of the stage that
failed and how long it ran before failing. Check failures only ever live
inside the validation battery and are turned into step results there.
"""

from __future__ import annotations


class LookoutError(Exception):
    """Base class for errors raised by lookout."""


class PipelineError(LookoutError):
    """A pipeline stage failed and the run can no longer succeed."""

    def __init__(self, step: str, message: str, elapsed_ms: int | None = None) -> None:
        super().__init__(message)
        self.step = step
        self.message = message
        self.elapsed_ms = elapsed_ms

    def __str__(self) -> str:
        return self.message


class PreparationError(PipelineError):
    pass


class SessionError(PipelineError):
    pass


class NavigationError(PipelineError):
    pass


class ComponentNotFoundError(PipelineError):
    pass


class CaptureError(PipelineError):
    pass


class UploadError(PipelineError):
    pass


class CheckFailure(LookoutError):
    """A validation probe found its element missing or in the wrong state."""
