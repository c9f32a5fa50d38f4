"""Tests for reading and writing project files."""

import json

import pytest

from lineloc.extraction.project_parser import ProjectFileParser
from lineloc.extraction.project_writer import ProjectFileWriter
from lineloc.models.localization import LocalizationInfo, ProjectLocalizationData

from conftest import write_project


def test_parse_project(project_file):
    data = ProjectFileParser().parse(str(project_file))
    assert data.base_language == "en"
    assert data.version == 2
    assert data.localizations["fr"] == LocalizationInfo(
        strings="${ProjectRoot}/Localisation/fr.csv",
        assets="${ProjectRoot}/Audio/fr",
    )
    assert data.localizations["de"] == LocalizationInfo(strings="Localisation/de.csv")
    assert data.extra == {"sourceFiles": ["**/*.yarn"]}


def test_parse_empty_paths_are_absent():
    data = ProjectFileParser().parse_string(json.dumps({
        "projectFileVersion": 2,
        "baseLanguage": "en",
        "localisation": {"en": {"strings": "", "assets": ""}},
    }))
    assert data.localizations["en"].is_empty()
    assert data.localizations["en"].strings is None


def test_parse_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ProjectFileParser().parse(str(tmp_path / "missing.lineproject"))


@pytest.mark.parametrize("content", [
    "not json",
    "[]",
    json.dumps({"baseLanguage": "en"}),
    json.dumps({"projectFileVersion": 1, "baseLanguage": "en"}),
    json.dumps({"projectFileVersion": 2}),
    json.dumps({"projectFileVersion": 2, "baseLanguage": "en", "localisation": {"fr": "fr.csv"}}),
])
def test_parse_invalid(content):
    with pytest.raises(ValueError):
        ProjectFileParser().parse_string(content)


def test_old_version_asks_for_upgrade():
    with pytest.raises(ValueError, match="upgrad"):
        ProjectFileParser().parse_string(json.dumps({"projectFileVersion": 1, "baseLanguage": "en"}))


def test_write_preserves_other_fields(tmp_path, project_file):
    data = ProjectFileParser().parse(str(project_file))
    out = tmp_path / "out.lineproject"
    ProjectFileWriter().write(data, str(out))

    written = json.loads(out.read_text(encoding="utf-8"))
    assert written["sourceFiles"] == ["**/*.yarn"]
    assert written["baseLanguage"] == "en"
    assert list(written["localisation"]) == ["de", "fr"]
    assert written["localisation"]["de"] == {"strings": "Localisation/de.csv"}


def test_write_omits_absent_paths(tmp_path):
    data = ProjectLocalizationData(
        base_language="en",
        localizations={"fr": LocalizationInfo(assets="Audio/fr")},
    )
    text = ProjectFileWriter().to_string(data)
    assert json.loads(text)["localisation"] == {"fr": {"assets": "Audio/fr"}}


def test_write_round_trip(tmp_path):
    path = write_project(tmp_path / "p.lineproject", base_language="fr", localisation={"en": {"assets": "a"}})
    data = ProjectFileParser().parse(str(path))
    ProjectFileWriter().write(data, str(path))
    assert ProjectFileParser().parse(str(path)) == data


def test_write_has_trailing_newline_and_no_leftovers(tmp_path):
    out = tmp_path / "sub" / "p.lineproject"
    ProjectFileWriter().write(ProjectLocalizationData(base_language="en"), str(out))
    assert out.read_text(encoding="utf-8").endswith("}\n")
    assert [p.name for p in out.parent.iterdir()] == ["p.lineproject"]


def test_failed_write_keeps_previous_file(tmp_path, monkeypatch):
    path = write_project(tmp_path / "p.lineproject", base_language="en")
    before = path.read_text(encoding="utf-8")

    def explode(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("lineloc.extraction.project_writer.os.replace", explode)
    with pytest.raises(OSError):
        ProjectFileWriter().write(ProjectLocalizationData(base_language="fr"), str(path))

    assert path.read_text(encoding="utf-8") == before
    assert [p.name for p in tmp_path.iterdir()] == ["p.lineproject"]
