"""Errors raised by the reconciliation engine and line providers."""

from pathlib import Path
from typing import Optional


class LocalizationError(Exception):
    """Base class for all lineloc errors."""


class PathOutsideProjectError(LocalizationError, ValueError):
    """A reference cannot be stored relative to the project root."""

    def __init__(self, path: Path, project_root: Path):
        self.path = path
        self.project_root = project_root
        super().__init__(f"{path} is outside the project root {project_root}")


class ReferenceNotFoundError(LocalizationError, FileNotFoundError):
    """A stored path no longer points at an existing file or folder."""

    def __init__(self, stored: str, resolved: Optional[Path] = None):
        self.stored = stored
        self.resolved = resolved
        message = f"Stored path does not resolve: {stored}"
        if resolved is not None:
            message += f" (looked for {resolved})"
        super().__init__(message)


class LineNotReadyError(LocalizationError, RuntimeError):
    """Lines were requested before the prepared batch became available."""


class UnknownLineIDError(LocalizationError, LookupError):
    """The line ID was not prepared, or the line source has no such line."""

    def __init__(self, line_id: str, reason: str = "was not prepared"):
        self.line_id = line_id
        super().__init__(f"Line {line_id!r} {reason}")


class DuplicateLanguageError(LocalizationError, ValueError):
    """A working set contains the same language more than once."""

    def __init__(self, language_id: str):
        self.language_id = language_id
        super().__init__(f"Language {language_id!r} appears more than once")
