from pathlib import Path


class ObsStreamSetupError(Exception):
    def __init__(
        self,
        message: str,
        path: Path | None = None,
        process_name: str | None = None,
    ):
        super().__init__(message)

        self.message = message
        self.path = path
        self.process_name = process_name


class ValidationError(ObsStreamSetupError, ValueError):
    """Malformed model input. Raised before any I/O."""


class ConflictError(ObsStreamSetupError):
    """A target file already exists and the write policy forbids replacing it."""

    def __init__(self, message: str, paths: list[Path]):
        super().__init__(message, path=paths[0] if len(paths) > 0 else None)

        self.paths = paths


class PreconditionError(ObsStreamSetupError):
    """Unsafe to proceed: target application running, missing dependency or secret."""


class NotFoundError(ObsStreamSetupError):
    """None of the candidate executable paths exists."""

    def __init__(self, message: str, candidates: list[str]):
        super().__init__(message)

        self.candidates = candidates


class LaunchError(ObsStreamSetupError):
    """The executable exists but the process could not be started."""
