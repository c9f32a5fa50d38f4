"""Data models for lineloc."""

from .localization import LocalizationEntry, LocalizationInfo, ProjectLocalizationData
from .markup import MarkupAttribute, MarkupParseResult
from .line import LineAudio, LineStatus, LocalizedLine

__all__ = [
    "LocalizationEntry",
    "LocalizationInfo",
    "ProjectLocalizationData",
    "MarkupAttribute",
    "MarkupParseResult",
    "LineAudio",
    "LineStatus",
    "LocalizedLine",
]
