"""Data models for a project's localization settings."""

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class LocalizationEntry:
    """One language row in the editable working set."""

    language_id: str
    strings_file: Optional[Path] = None  # unused for the base language
    assets_folder: Optional[Path] = None
    # Stored paths that no longer resolve, written back as they were
    strings_stored: Optional[str] = None
    assets_stored: Optional[str] = None


@dataclass
class LocalizationInfo:
    """Stored paths for a single language."""

    strings: Optional[str] = None
    assets: Optional[str] = None

    def is_empty(self) -> bool:
        """Check if this entry carries no paths at all."""
        return not self.strings and not self.assets


@dataclass
class ProjectLocalizationData:
    """The persisted localization record of a project."""

    base_language: str
    localizations: Dict[str, LocalizationInfo] = field(default_factory=dict)
    version: int = 2
    extra: Dict[str, Any] = field(default_factory=dict)  # other project fields, kept verbatim

    def copy(self) -> "ProjectLocalizationData":
        """Return an independent deep copy."""
        return copy.deepcopy(self)

    def languages(self) -> list:
        """All languages known to the project, base language first."""
        others = sorted(k for k in self.localizations if k != self.base_language)
        return [self.base_language] + others
