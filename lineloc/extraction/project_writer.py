"""Writer for the JSON project file."""

import json
import os
import tempfile
from typing import Dict, Any
from pathlib import Path

from ..models.localization import LocalizationInfo, ProjectLocalizationData
from .project_parser import VERSION_KEY, BASE_LANGUAGE_KEY, LOCALISATION_KEY


class ProjectFileWriter:
    """Writer for project files."""

    def write(self, data: ProjectLocalizationData, output_path: str) -> None:
        """
        Write a project record to disk.

        The file is written to a temporary sibling first and then moved into
        place, so readers see either the old or the new file, never a mix.

        Args:
            data: The record to write
            output_path: Path to write the file to
        """
        content = self.to_string(data) + "\n"

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def to_string(self, data: ProjectLocalizationData) -> str:
        """
        Convert a project record to a JSON string.

        Args:
            data: The record to convert

        Returns:
            JSON string representation
        """
        return json.dumps(self._to_dict(data), indent=2, ensure_ascii=False)

    def _to_dict(self, data: ProjectLocalizationData) -> Dict[str, Any]:
        """Convert the record to a dictionary for JSON serialization."""
        result: Dict[str, Any] = {VERSION_KEY: data.version}
        result.update(data.extra)
        result[BASE_LANGUAGE_KEY] = data.base_language

        # Sort by language code for consistent output
        result[LOCALISATION_KEY] = {
            lang: self._localization_to_dict(data.localizations[lang])
            for lang in sorted(data.localizations)
        }
        return result

    def _localization_to_dict(self, info: LocalizationInfo) -> Dict[str, Any]:
        """Convert a LocalizationInfo to dictionary."""
        loc_dict: Dict[str, Any] = {}

        if info.strings:
            loc_dict["strings"] = info.strings

        if info.assets:
            loc_dict["assets"] = info.assets

        return loc_dict
