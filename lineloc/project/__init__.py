"""Project localization settings: paths, reconciliation and editing."""

from .paths import PathResolver
from .reconcile import (
    check_unique_languages,
    commit,
    ensure_base_language_entry,
    needs_base_language_entry,
)
from .session import LocalizationEditSession

__all__ = [
    "PathResolver",
    "check_unique_languages",
    "commit",
    "ensure_base_language_entry",
    "needs_base_language_entry",
    "LocalizationEditSession",
]
