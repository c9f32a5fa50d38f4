"""Runtime line providers and line sources."""

from .database import LocalizationDatabase
from .provider import (
    AudioLineSource,
    LineProvider,
    LineProviderCache,
    LineSource,
    audio_line_provider,
    text_line_provider,
)

__all__ = [
    "LocalizationDatabase",
    "AudioLineSource",
    "LineProvider",
    "LineProviderCache",
    "LineSource",
    "audio_line_provider",
    "text_line_provider",
]
