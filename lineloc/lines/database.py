"""In-memory line source built from a project's strings tables."""

import logging
import threading
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from ..extraction.strings_table import StringsTableReader
from ..models.localization import ProjectLocalizationData
from ..project.paths import PathResolver, PathLike

logger = logging.getLogger(__name__)

LINE_ID_PREFIX = "line:"


def asset_key(line_id: str) -> str:
    """The file stem an asset for this line is expected to have."""
    if line_id.startswith(LINE_ID_PREFIX):
        return line_id[len(LINE_ID_PREFIX):]
    return line_id


class LocalizationDatabase:
    """
    Line text per language, substitution values, and per-language asset folders.

    Languages without a table of their own read from the base language's
    table.
    """

    def __init__(self, base_language: str):
        self.base_language = base_language
        self._tables: Dict[str, Dict[str, str]] = {}
        self._asset_folders: Dict[str, Path] = {}
        self._asset_index: Dict[str, Dict[str, Path]] = {}
        self._substitutions: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_project(
        cls,
        data: ProjectLocalizationData,
        project_root: PathLike,
        base_strings: Optional[Mapping[str, str]] = None,
        resolver: Optional[PathResolver] = None,
    ) -> "LocalizationDatabase":
        """
        Build a database from a project record.

        The base language's strings path is ignored; its text comes from
        `base_strings`. Every other language's strings table is read from
        disk. Missing files and folders raise ReferenceNotFoundError.

        Args:
            data: Project localization record
            project_root: Root folder that stored paths are relative to
            base_strings: Base language text keyed by line ID
            resolver: PathResolver to use (defaults to configured style)
        """
        resolver = resolver or PathResolver()
        reader = StringsTableReader()
        database = cls(data.base_language)
        database.add_table(data.base_language, base_strings or {})

        for lang, info in data.localizations.items():
            if info.strings and lang != data.base_language:
                path = resolver.to_reference(info.strings, project_root)
                database.add_table(lang, reader.read(str(path)))
            if info.assets:
                database.set_asset_folder(lang, resolver.to_reference(info.assets, project_root))

        return database

    def add_table(self, language: str, table: Mapping[str, str]) -> None:
        """Set the text table for a language."""
        with self._lock:
            self._tables[language] = dict(table)

    def set_asset_folder(self, language: str, folder: PathLike) -> None:
        """Set the folder holding a language's line assets."""
        with self._lock:
            self._asset_folders[language] = Path(folder)
            self._asset_index.pop(language, None)

    def set_substitutions(self, line_id: str, values: Sequence[str]) -> None:
        """Record the latest substitution values supplied for a line."""
        with self._lock:
            self._substitutions[line_id] = [str(v) for v in values]

    @property
    def languages(self) -> List[str]:
        return sorted(self._tables)

    def line_ids(self, language: Optional[str] = None) -> List[str]:
        """All line IDs in a language's table (base language by default)."""
        table = self._table_for(language or self.base_language)
        return sorted(table)

    def _table_for(self, language: str) -> Dict[str, str]:
        with self._lock:
            table = self._tables.get(language)
            if table is None:
                table = self._tables.get(self.base_language, {})
            return table

    def has_line(self, line_id: str) -> bool:
        """Check if any language's table contains the line."""
        with self._lock:
            return any(line_id in table for table in self._tables.values())

    def get_raw_text(self, line_id: str, language_code: str) -> Optional[str]:
        """Get a line's text, or None if the language's table lacks it."""
        return self._table_for(language_code).get(line_id)

    def get_substitutions(self, line_id: str) -> List[str]:
        with self._lock:
            return list(self._substitutions.get(line_id, []))

    def get_audio_asset(self, line_id: str, language_code: str) -> Optional[Path]:
        """Find the asset file for a line in the language's asset folder."""
        index = self._assets_for(language_code)
        return index.get(asset_key(line_id))

    def _assets_for(self, language: str) -> Dict[str, Path]:
        with self._lock:
            if language in self._asset_index:
                return self._asset_index[language]
            folder = self._asset_folders.get(language)

        index: Dict[str, Path] = {}
        if folder is not None and folder.is_dir():
            for path in sorted(folder.rglob("*")):
                if path.is_file() and not path.name.startswith("."):
                    index.setdefault(path.stem, path)
            logger.debug("Indexed %d assets for %s in %s", len(index), language, folder)

        with self._lock:
            self._asset_index[language] = index
        return index
