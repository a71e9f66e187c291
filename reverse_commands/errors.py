from __future__ import annotations


EXIT_OK = 0
EXIT_USAGE = 2
EXIT_CONFIRMATION = 3
EXIT_NO_CANDIDATES = 4
EXIT_FILE_ERROR = 5


class ReverseCommandsError(Exception):
    """Base error; ``exit_code`` is what the CLI exits with."""

    exit_code = 1


class UsageError(ReverseCommandsError):
    exit_code = EXIT_USAGE


class ConfirmationRequired(ReverseCommandsError):
    """Raised when --force-sensitive is given without the exact token."""

    exit_code = EXIT_CONFIRMATION


class NoCandidatesError(ReverseCommandsError):
    exit_code = EXIT_NO_CANDIDATES

    def __init__(self, search_path: str) -> None:
        super().__init__(f"No candidate executables found in PATH ({search_path}).")
        self.search_path = search_path


class BlockFileError(ReverseCommandsError):
    """Reading or atomically replacing the startup file failed."""

    exit_code = EXIT_FILE_ERROR

    def __init__(self, path, cause: OSError) -> None:
        super().__init__(f"{path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause
