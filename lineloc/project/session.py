"""Editing session over a project's localization settings."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import DuplicateLanguageError, ReferenceNotFoundError
from ..extraction.project_parser import ProjectFileParser
from ..extraction.project_writer import ProjectFileWriter
from ..models.localization import LocalizationEntry, ProjectLocalizationData
from .paths import PathResolver, PathLike
from .reconcile import commit, ensure_base_language_entry

logger = logging.getLogger(__name__)

_UNSET = object()


class LocalizationEditSession:
    """
    Collects edits to a project's languages and applies them in one commit.

    The session holds the working set of entries, which languages were
    modified, and whether the base language changed. It holds no
    reconciliation logic of its own; `apply` hands everything to `commit`.
    """

    def __init__(
        self,
        project_path: PathLike,
        data: ProjectLocalizationData,
        project_root: Optional[PathLike] = None,
        resolver: Optional[PathResolver] = None,
    ):
        """
        Initialize the session.

        Args:
            project_path: Path of the project file
            data: The persisted record the session starts from
            project_root: Root for stored paths (defaults to the project file's folder)
            resolver: PathResolver to use (defaults to configured style)
        """
        self.project_path = Path(project_path)
        self.project_root = Path(project_root) if project_root else self.project_path.parent
        self.resolver = resolver or PathResolver()
        self.writer = ProjectFileWriter()
        self._reset(data)

    @classmethod
    def load(
        cls,
        project_path: PathLike,
        project_root: Optional[PathLike] = None,
        resolver: Optional[PathResolver] = None,
    ) -> "LocalizationEditSession":
        """Open a session on an existing project file."""
        data = ProjectFileParser().parse(str(project_path))
        return cls(project_path, data, project_root=project_root, resolver=resolver)

    def _reset(self, data: ProjectLocalizationData) -> None:
        self.data = data
        self.base_language = data.base_language
        self.broken_paths: Dict[str, List[str]] = {}
        self.entries: List[LocalizationEntry] = ensure_base_language_entry(
            [self._entry_from_data(lang) for lang in sorted(data.localizations)],
            data.base_language,
        )
        self.modified: set = set()
        self.base_language_modified = False
        self.localizations_added_or_removed = False

    def _entry_from_data(self, language_id: str) -> LocalizationEntry:
        info = self.data.localizations[language_id]
        strings_file = self._reference(language_id, info.strings)
        assets_folder = self._reference(language_id, info.assets)
        return LocalizationEntry(
            language_id=language_id,
            strings_file=strings_file,
            assets_folder=assets_folder,
            strings_stored=info.strings if strings_file is None and info.strings else None,
            assets_stored=info.assets if assets_folder is None and info.assets else None,
        )

    def _reference(self, language_id: str, stored: Optional[str]) -> Optional[Path]:
        if not stored:
            return None
        try:
            return self.resolver.to_reference(stored, self.project_root)
        except ReferenceNotFoundError as e:
            # Keep the row; the user has to fix or clear the path
            logger.warning("Broken path for %s: %s", language_id, e)
            self.broken_paths.setdefault(language_id, []).append(stored)
            return None

    @property
    def has_modifications(self) -> bool:
        """Check if there is anything to apply."""
        return (
            self.localizations_added_or_removed
            or bool(self.modified)
            or self.base_language_modified
        )

    def get_entry(self, language_id: str) -> LocalizationEntry:
        """Get the working entry for a language."""
        for entry in self.entries:
            if entry.language_id == language_id:
                return entry
        raise KeyError(f"No localization for {language_id!r}")

    def is_base_language(self, language_id: str) -> bool:
        return language_id == self.base_language

    def add_localization(
        self,
        language_id: str,
        strings_file: Optional[PathLike] = None,
        assets_folder: Optional[PathLike] = None,
    ) -> LocalizationEntry:
        """
        Add a language to the working set.

        Raises:
            DuplicateLanguageError: If the language is already present
        """
        if any(e.language_id == language_id for e in self.entries):
            raise DuplicateLanguageError(language_id)

        entry = LocalizationEntry(
            language_id=language_id,
            strings_file=Path(strings_file) if strings_file else None,
            assets_folder=Path(assets_folder) if assets_folder else None,
        )
        self.entries.append(entry)
        self.modified.add(language_id)
        self.localizations_added_or_removed = True
        return entry

    def remove_localization(self, language_id: str) -> None:
        """
        Remove a language from the working set.

        Raises:
            ValueError: If the language is the base language
            KeyError: If the language is not present
        """
        if self.is_base_language(language_id):
            raise ValueError(f"Cannot remove the base language {language_id!r}")

        entry = self.get_entry(language_id)
        self.entries.remove(entry)
        self.modified.discard(language_id)
        self.broken_paths.pop(language_id, None)
        self.localizations_added_or_removed = True

    def update_localization(
        self,
        language_id: str,
        strings_file=_UNSET,
        assets_folder=_UNSET,
        new_language_id: Optional[str] = None,
    ) -> LocalizationEntry:
        """
        Edit a language's entry. Pass None to clear a path.

        Raises:
            KeyError: If the language is not present
            DuplicateLanguageError: If renaming onto an existing language
        """
        entry = self.get_entry(language_id)
        changes = {}

        if new_language_id and new_language_id != language_id:
            if any(e.language_id == new_language_id for e in self.entries):
                raise DuplicateLanguageError(new_language_id)
            changes["language_id"] = new_language_id
        if strings_file is not _UNSET:
            changes["strings_file"] = Path(strings_file) if strings_file else None
            changes["strings_stored"] = None
            self._forget_broken(language_id, entry.strings_stored)
        if assets_folder is not _UNSET:
            changes["assets_folder"] = Path(assets_folder) if assets_folder else None
            changes["assets_stored"] = None
            self._forget_broken(language_id, entry.assets_stored)

        updated = replace(entry, **changes)
        self.entries[self.entries.index(entry)] = updated
        self.modified.add(updated.language_id)
        if updated.language_id != language_id:
            self.modified.discard(language_id)
            if language_id in self.broken_paths:
                self.broken_paths[updated.language_id] = self.broken_paths.pop(language_id)
        return updated

    def _forget_broken(self, language_id: str, stored: Optional[str]) -> None:
        paths = self.broken_paths.get(language_id)
        if stored is None or not paths or stored not in paths:
            return
        paths.remove(stored)
        if not paths:
            del self.broken_paths[language_id]

    def set_base_language(self, language_id: str) -> None:
        """Change the project's base language."""
        if language_id == self.base_language:
            return
        self.base_language = language_id
        self.base_language_modified = True

    def apply(self) -> ProjectLocalizationData:
        """
        Commit the working set and write the project file.

        Returns:
            The record now on disk
        """
        result = commit(
            self.entries,
            self.base_language,
            self.data,
            self.modified,
            self.base_language_modified,
            self.project_root,
            resolver=self.resolver,
        )

        self.writer.write(result, str(self.project_path))
        logger.info(
            "Saved %s (base language %s, %d localizations)",
            self.project_path, result.base_language, len(result.localizations),
        )

        self.data = result
        self.modified.clear()
        self.base_language_modified = False
        self.localizations_added_or_removed = False
        self.entries = ensure_base_language_entry(self.entries, self.base_language)
        return result

    def revert(self) -> None:
        """Discard all unapplied edits."""
        self._reset(self.data)
