"""Parser for the JSON project file that stores localization settings."""

import json
from typing import Dict, Any, Optional
from pathlib import Path

from ..models.localization import LocalizationInfo, ProjectLocalizationData

CURRENT_PROJECT_VERSION = 2

VERSION_KEY = "projectFileVersion"
BASE_LANGUAGE_KEY = "baseLanguage"
LOCALISATION_KEY = "localisation"


class ProjectFileParser:
    """Parser for project files."""

    def parse(self, file_path: str) -> ProjectLocalizationData:
        """
        Parse a project file and return its localization record.

        Args:
            file_path: Path to the project file

        Returns:
            ProjectLocalizationData with all other fields kept in `extra`
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in project file {file_path}: {e}") from e

        return self._parse_data(data)

    def parse_string(self, content: str) -> ProjectLocalizationData:
        """
        Parse project file content from a string.

        Args:
            content: JSON string content

        Returns:
            ProjectLocalizationData
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in project file: {e}") from e
        return self._parse_data(data)

    def _parse_data(self, data: Dict[str, Any]) -> ProjectLocalizationData:
        """Parse the JSON data structure into our model."""
        if not isinstance(data, dict):
            raise ValueError("Project file must contain a JSON object")

        version = data.get(VERSION_KEY)
        if not isinstance(version, int) or version < CURRENT_PROJECT_VERSION:
            raise ValueError(
                f"Project file version {version!r} needs upgrading to version {CURRENT_PROJECT_VERSION}"
            )

        base_language = data.get(BASE_LANGUAGE_KEY)
        if not isinstance(base_language, str) or not base_language:
            raise ValueError(f"Project file is missing '{BASE_LANGUAGE_KEY}'")

        localizations = {}
        for lang, loc_data in (data.get(LOCALISATION_KEY) or {}).items():
            localizations[lang] = self._parse_localization(lang, loc_data)

        extra = {
            key: value for key, value in data.items()
            if key not in (VERSION_KEY, BASE_LANGUAGE_KEY, LOCALISATION_KEY)
        }

        return ProjectLocalizationData(
            base_language=base_language,
            localizations=localizations,
            version=version,
            extra=extra,
        )

    def _parse_localization(self, lang: str, loc_data: Any) -> LocalizationInfo:
        """Parse a single language's entry."""
        if not isinstance(loc_data, dict):
            raise ValueError(f"Localisation entry for {lang!r} must be an object")

        return LocalizationInfo(
            strings=self._optional_path(loc_data.get("strings")),
            assets=self._optional_path(loc_data.get("assets")),
        )

    @staticmethod
    def _optional_path(value: Optional[str]) -> Optional[str]:
        # Empty strings mean "not set"
        return value or None
