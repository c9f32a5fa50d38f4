"""Shared fixtures for lineloc tests."""

import csv
import json

import pytest

from lineloc.project.paths import PathResolver

STRINGS_HEADER = ["language", "id", "text", "file", "node", "lineNumber", "lock", "comment"]


def write_strings(path, language, rows):
    """Write a strings table with the usual column set."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(STRINGS_HEADER)
        for line_id, text in rows.items():
            writer.writerow([language, line_id, text, "Start.yarn", "Start", "1", "", ""])
    return path


def write_project(path, base_language="en", localisation=None, **extra):
    """Write a project file."""
    data = {"projectFileVersion": 2, "baseLanguage": base_language}
    data.update(extra)
    data["localisation"] = localisation or {}
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def resolver():
    return PathResolver(style="placeholder", placeholder="${ProjectRoot}")


@pytest.fixture
def relative_resolver():
    return PathResolver(style="relative", placeholder="${ProjectRoot}")


@pytest.fixture
def base_table():
    return {
        "line:greet": "Amy: Hello there!",
        "line:name": "Hello [character name=\"Amy\"]Amy[/character]",
        "line:gold": "You have {0} gold.",
        "line:plain": "The wind howls.",
    }


@pytest.fixture
def project_dir(tmp_path, base_table):
    """A project folder with French strings and audio, German strings only."""
    root = tmp_path / "project"
    root.mkdir()

    write_strings(root / "base.csv", "en", base_table)
    write_strings(root / "Localisation" / "fr.csv", "fr", {
        "line:greet": "Amy: Bonjour !",
        "line:name": "Bonjour [character name=\"Amy\"]Amy[/character]",
        "line:gold": "Vous avez {0} pièces d'or.",
    })
    write_strings(root / "Localisation" / "de.csv", "de", {
        "line:greet": "Amy: Hallo!",
        "line:plain": "Der Wind heult.",
    })

    audio = root / "Audio" / "fr"
    audio.mkdir(parents=True)
    (audio / "greet.wav").write_bytes(b"RIFF")
    (audio / "name.ogg").write_bytes(b"OggS")

    write_project(
        root / "Game.lineproject",
        base_language="en",
        localisation={
            "fr": {
                "strings": "${ProjectRoot}/Localisation/fr.csv",
                "assets": "${ProjectRoot}/Audio/fr",
            },
            "de": {"strings": "Localisation/de.csv"},
        },
        sourceFiles=["**/*.yarn"],
    )
    return root


@pytest.fixture
def project_file(project_dir):
    return project_dir / "Game.lineproject"
