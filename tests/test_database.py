"""Tests for the in-memory line database."""

import pytest

from lineloc.errors import ReferenceNotFoundError
from lineloc.extraction.project_parser import ProjectFileParser
from lineloc.lines.database import LocalizationDatabase, asset_key
from lineloc.models.localization import LocalizationInfo


@pytest.fixture
def database(project_file, project_dir, base_table, resolver):
    data = ProjectFileParser().parse(str(project_file))
    return LocalizationDatabase.from_project(data, project_dir, base_strings=base_table, resolver=resolver)


def test_from_project_loads_tables(database):
    assert database.base_language == "en"
    assert database.languages == ["de", "en", "fr"]
    assert database.get_raw_text("line:greet", "fr") == "Amy: Bonjour !"
    assert database.get_raw_text("line:greet", "en") == "Amy: Hello there!"


def test_missing_line_in_language_table(database):
    assert database.get_raw_text("line:plain", "fr") is None
    assert database.has_line("line:plain")


def test_language_without_table_uses_base(database):
    assert database.get_raw_text("line:plain", "ja") == "The wind howls."


def test_has_line(database):
    assert database.has_line("line:gold")
    assert not database.has_line("line:nope")


def test_line_ids(database):
    assert database.line_ids() == ["line:gold", "line:greet", "line:name", "line:plain"]
    assert database.line_ids("de") == ["line:greet", "line:plain"]


def test_substitutions_default_empty_and_last_value_wins(database):
    assert database.get_substitutions("line:gold") == []
    database.set_substitutions("line:gold", [5])
    database.set_substitutions("line:gold", ["12"])
    assert database.get_substitutions("line:gold") == ["12"]


def test_audio_assets(database, project_dir):
    assert database.get_audio_asset("line:greet", "fr") == project_dir / "Audio" / "fr" / "greet.wav"
    assert database.get_audio_asset("line:name", "fr") == project_dir / "Audio" / "fr" / "name.ogg"
    assert database.get_audio_asset("line:gold", "fr") is None
    # No asset folder for German
    assert database.get_audio_asset("line:greet", "de") is None


def test_asset_folder_change_reindexes(database, tmp_path):
    folder = tmp_path / "new_audio"
    folder.mkdir()
    (folder / "gold.mp3").write_bytes(b"ID3")
    database.get_audio_asset("line:gold", "fr")

    database.set_asset_folder("fr", folder)

    assert database.get_audio_asset("line:gold", "fr") == folder / "gold.mp3"


def test_base_strings_path_is_ignored(project_dir, resolver, base_table):
    data = ProjectFileParser().parse(str(project_dir / "Game.lineproject"))
    data.localizations["en"] = LocalizationInfo(strings="${ProjectRoot}/missing.csv")

    database = LocalizationDatabase.from_project(data, project_dir, base_strings=base_table, resolver=resolver)

    assert database.get_raw_text("line:plain", "en") == "The wind howls."


def test_broken_strings_path_raises(project_dir, resolver):
    (project_dir / "Localisation" / "fr.csv").unlink()
    data = ProjectFileParser().parse(str(project_dir / "Game.lineproject"))

    with pytest.raises(ReferenceNotFoundError):
        LocalizationDatabase.from_project(data, project_dir, resolver=resolver)


def test_asset_key():
    assert asset_key("line:abc123") == "abc123"
    assert asset_key("intro_01") == "intro_01"
