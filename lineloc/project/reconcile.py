"""Reconciles an edited set of localization entries with the persisted record."""

import logging
from collections import Counter
from typing import AbstractSet, List, Optional, Sequence

from ..errors import DuplicateLanguageError
from ..models.localization import LocalizationEntry, LocalizationInfo, ProjectLocalizationData
from .paths import PathResolver, PathLike

logger = logging.getLogger(__name__)


def check_unique_languages(working_set: Sequence[LocalizationEntry]) -> None:
    """Raise DuplicateLanguageError if any language appears twice."""
    counts = Counter(entry.language_id for entry in working_set)
    for language_id, count in counts.items():
        if count > 1:
            raise DuplicateLanguageError(language_id)


def commit(
    working_set: Sequence[LocalizationEntry],
    new_base_language: str,
    previous_data: ProjectLocalizationData,
    modified: AbstractSet[str],
    base_language_changed: bool,
    project_root: PathLike,
    resolver: Optional[PathResolver] = None,
) -> ProjectLocalizationData:
    """
    Compute the record that results from applying a working set.

    Only entries flagged as modified are rewritten. When the base language
    changed, the entry for the previous base language is rewritten too, since
    its strings file was ignored while it was the base and must now be
    stored. Languages missing from the working set are removed, and a base
    language entry with no paths is pruned.

    `previous_data` is never modified; on error nothing has changed.

    Args:
        working_set: Edited entries, one per language (order is irrelevant)
        new_base_language: Base language after the edit
        previous_data: The currently persisted record
        modified: Language IDs whose entries were edited
        base_language_changed: Whether the base language was edited
        project_root: Root folder that stored paths are relative to
        resolver: PathResolver to use (defaults to configured style)

    Returns:
        The new record, for the caller to persist

    Raises:
        DuplicateLanguageError: If the working set repeats a language
        PathOutsideProjectError: If a reference cannot be stored
    """
    check_unique_languages(working_set)
    resolver = resolver or PathResolver()

    result = previous_data.copy()
    present = {entry.language_id for entry in working_set}

    removed = [lang for lang in result.localizations if lang not in present]
    for lang in removed:
        del result.localizations[lang]

    written = []
    for entry in working_set:
        # A demoted base language is written even if untouched
        was_previous_base = (
            base_language_changed and entry.language_id == previous_data.base_language
        )

        if entry.language_id not in modified and not was_previous_base:
            continue

        result.localizations[entry.language_id] = _to_info(entry, resolver, project_root)
        written.append(entry.language_id)

    result.base_language = new_base_language

    base_info = result.localizations.get(result.base_language)
    pruned = base_info is not None and base_info.is_empty()
    if pruned:
        # Nothing useful to say about the base language; drop it
        del result.localizations[result.base_language]

    logger.debug(
        "Commit: base=%s removed=%s written=%s pruned_base=%s",
        new_base_language, removed, written, pruned,
    )
    return result


def _to_info(entry: LocalizationEntry, resolver: PathResolver, project_root: PathLike) -> LocalizationInfo:
    info = LocalizationInfo(strings=entry.strings_stored, assets=entry.assets_stored)
    if entry.strings_file is not None:
        info.strings = resolver.to_stored(entry.strings_file, project_root)
    if entry.assets_folder is not None:
        info.assets = resolver.to_stored(entry.assets_folder, project_root)
    return info


def needs_base_language_entry(working_set: Sequence[LocalizationEntry], base_language: str) -> bool:
    """Check if the working set is missing a row for the base language."""
    return not any(entry.language_id == base_language for entry in working_set)


def ensure_base_language_entry(
    working_set: Sequence[LocalizationEntry], base_language: str
) -> List[LocalizationEntry]:
    """Return the working set with an empty base language row appended if missing."""
    entries = list(working_set)
    if needs_base_language_entry(entries, base_language):
        entries.append(LocalizationEntry(language_id=base_language))
    return entries
