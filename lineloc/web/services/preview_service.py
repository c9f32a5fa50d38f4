"""Line preview service: a line provider over the session's current project."""

from pathlib import Path
from typing import Dict, Optional

from ...extraction.strings_table import StringsTableReader
from ...lines.database import LocalizationDatabase
from ...lines.provider import LineProviderCache
from ...project.session import LocalizationEditSession


class PreviewService:
    """
    Owns the line provider used by the web UI.

    The provider is built on first use from the project's applied settings,
    and rebuilt when the settings are applied again or the preview language
    changes.
    """

    def __init__(
        self,
        session: LocalizationEditSession,
        base_strings_path: Optional[Path] = None,
        include_audio: bool = False,
    ):
        self.session = session
        self.base_strings_path = base_strings_path
        self.include_audio = include_audio
        self._provider: Optional[LineProviderCache] = None
        self._language: Optional[str] = None

    def _base_strings(self) -> Dict[str, str]:
        if self.base_strings_path is None:
            return {}
        return StringsTableReader().read(str(self.base_strings_path))

    def provider(self, language: Optional[str] = None) -> LineProviderCache:
        """
        Get the line provider, building it if needed.

        Raises:
            ReferenceNotFoundError: If a strings table or asset folder is missing
        """
        if self._provider is not None and (language is None or language == self._language):
            return self._provider

        database = LocalizationDatabase.from_project(
            self.session.data,
            self.session.project_root,
            base_strings=self._base_strings(),
            resolver=self.session.resolver,
        )
        self.close()
        self._provider = LineProviderCache(
            database,
            text_language=language,
            include_audio=self.include_audio,
        )
        self._language = self._provider.current_text_language_code
        return self._provider

    @property
    def current(self) -> Optional[LineProviderCache]:
        return self._provider

    def invalidate(self) -> None:
        """Drop the provider so the next request rebuilds it."""
        self.close()

    def close(self) -> None:
        if self._provider is not None:
            self._provider.close(wait=False)
            self._provider = None
            self._language = None
