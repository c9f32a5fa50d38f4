"""Configuration management for lineloc."""

import os
import re
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

load_dotenv()

PATH_STYLES = ("relative", "placeholder")

_PLACEHOLDER_PATTERN = re.compile(r"^\$\{[A-Za-z_][A-Za-z0-9_]*\}$")


@dataclass
class Config:
    """Application configuration."""

    # Stored path form: root-relative, or prefixed with the project root token
    path_style: str = field(
        default_factory=lambda: os.getenv("LINELOC_PATH_STYLE", "placeholder")
    )
    project_root_variable: str = field(
        default_factory=lambda: os.getenv("LINELOC_PROJECT_ROOT_VARIABLE", "${ProjectRoot}")
    )

    # Runtime text language
    text_language: str = field(
        default_factory=lambda: os.getenv("LINELOC_TEXT_LANGUAGE", "en")
    )
    text_language_override: str = field(
        default_factory=lambda: os.getenv("LINELOC_TEXT_LANGUAGE_OVERRIDE", "")
    )

    # Background line preparation
    prepare_workers: int = field(
        default_factory=lambda: int(os.getenv("LINELOC_PREPARE_WORKERS", "4"))
    )

    log_level: str = field(default_factory=lambda: os.getenv("LINELOC_LOG_LEVEL", "info"))

    # Project served by the web UI when none is given on the command line
    project_path: str = field(default_factory=lambda: os.getenv("LINELOC_PROJECT", ""))

    # Language display names (for tables and labels)
    LANGUAGE_NAMES: dict = field(default_factory=lambda: {
        "de": "German",
        "en": "English",
        "es": "Spanish",
        "fr": "French",
        "it": "Italian",
        "ja": "Japanese",
        "ko": "Korean",
        "pt": "Portuguese",
        "ro": "Romanian",
        "ru": "Russian",
        "zh": "Chinese",
    })

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if self.path_style not in PATH_STYLES:
            errors.append(
                f"LINELOC_PATH_STYLE must be one of {', '.join(PATH_STYLES)}, got {self.path_style!r}"
            )
        if not _PLACEHOLDER_PATTERN.match(self.project_root_variable):
            errors.append(
                f"LINELOC_PROJECT_ROOT_VARIABLE must look like ${{Name}}, got {self.project_root_variable!r}"
            )
        if self.prepare_workers < 1:
            errors.append("LINELOC_PREPARE_WORKERS must be at least 1")
        return errors

    def format_language(self, code: str) -> str:
        """Render a language code as 'Display Name (code)'."""
        name = self.LANGUAGE_NAMES.get(code) or self.LANGUAGE_NAMES.get(code.split("-")[0])
        if not name:
            return code
        return f"{name} ({code})"


# Global config instance
config = Config()
