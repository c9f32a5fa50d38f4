"""Tests for the lineloc command line."""

import json

import pytest
from click.testing import CliRunner

from lineloc.cli import cli

from conftest import write_strings


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, *args):
    return runner.invoke(cli, ["--path-style", "placeholder", *args])


def read_project(project_file):
    return json.loads(project_file.read_text(encoding="utf-8"))


def test_show(runner, project_file):
    result = invoke(runner, "show", "-p", str(project_file))

    assert result.exit_code == 0, result.output
    assert "Game.lineproject" in result.output
    assert "French (fr)" in result.output
    assert "German (de)" in result.output
    assert "base language" in result.output


def test_check_all_good(runner, project_file):
    result = invoke(runner, "check", "-p", str(project_file))

    assert result.exit_code == 0, result.output
    assert "All localization paths resolve" in result.output


def test_check_reports_broken_paths(runner, project_file, project_dir):
    (project_dir / "Localisation" / "de.csv").unlink()

    result = invoke(runner, "check", "-p", str(project_file))

    assert result.exit_code == 1
    assert "Broken paths" in result.output
    assert "German (de)" in result.output


def test_add(runner, project_file, project_dir):
    strings = write_strings(project_dir / "Localisation" / "it.csv", "it", {"line:greet": "Amy: Ciao!"})

    result = invoke(runner, "add", "-p", str(project_file), "-l", "it", "--strings", str(strings))

    assert result.exit_code == 0, result.output
    assert "Saved" in result.output
    assert read_project(project_file)["localisation"]["it"] == {
        "strings": "${ProjectRoot}/Localisation/it.csv"
    }


def test_add_duplicate_fails_without_writing(runner, project_file):
    before = project_file.read_text(encoding="utf-8")

    result = invoke(runner, "add", "-p", str(project_file), "-l", "fr")

    assert result.exit_code == 1
    assert "more than once" in result.output
    assert project_file.read_text(encoding="utf-8") == before


def test_remove(runner, project_file):
    result = invoke(runner, "remove", "-p", str(project_file), "-l", "de")

    assert result.exit_code == 0, result.output
    assert "de" not in read_project(project_file)["localisation"]


def test_remove_base_language_fails(runner, project_file):
    result = invoke(runner, "remove", "-p", str(project_file), "-l", "en")

    assert result.exit_code == 1
    assert "base language" in result.output


def test_update_clear_assets(runner, project_file):
    result = invoke(runner, "update", "-p", str(project_file), "-l", "fr", "--clear-assets")

    assert result.exit_code == 0, result.output
    assert read_project(project_file)["localisation"]["fr"] == {
        "strings": "${ProjectRoot}/Localisation/fr.csv"
    }


def test_update_rename(runner, project_file):
    result = invoke(runner, "update", "-p", str(project_file), "-l", "de", "--rename", "de-AT")

    assert result.exit_code == 0, result.output
    localisation = read_project(project_file)["localisation"]
    assert "de" not in localisation
    assert localisation["de-AT"]["strings"] == "${ProjectRoot}/Localisation/de.csv"


def test_update_conflicting_flags(runner, project_file, project_dir):
    result = invoke(
        runner, "update", "-p", str(project_file), "-l", "fr",
        "--strings", str(project_dir / "base.csv"), "--clear-strings",
    )

    assert result.exit_code == 2
    assert "mutually exclusive" in result.output


def test_update_nothing_to_change(runner, project_file):
    result = invoke(runner, "update", "-p", str(project_file), "-l", "fr")

    assert result.exit_code == 0
    assert "Nothing to change" in result.output


def test_set_base(runner, project_file):
    result = invoke(runner, "set-base", "-p", str(project_file), "-l", "fr")

    assert result.exit_code == 0, result.output
    assert "Base language:" in result.output
    data = read_project(project_file)
    assert data["baseLanguage"] == "fr"
    assert "en" in data["localisation"]
    assert data["sourceFiles"] == ["**/*.yarn"]


def test_set_base_unchanged(runner, project_file):
    before = project_file.read_text(encoding="utf-8")

    result = invoke(runner, "set-base", "-p", str(project_file), "-l", "en")

    assert result.exit_code == 0
    assert "already" in result.output
    assert project_file.read_text(encoding="utf-8") == before


def test_preview(runner, project_file, project_dir):
    result = invoke(
        runner, "preview", "-p", str(project_file),
        "-b", str(project_dir / "base.csv"),
        "--language", "fr", "--override", "",
        "line:greet", "line:nope",
    )

    assert result.exit_code == 0, result.output
    assert "Bonjour !" in result.output
    assert "Amy" in result.output
    assert "Unknown line IDs" in result.output
    assert "line:nope" in result.output


def test_preview_broken_path(runner, project_file, project_dir):
    (project_dir / "Localisation" / "fr.csv").unlink()

    result = invoke(runner, "preview", "-p", str(project_file), "-b", str(project_dir / "base.csv"))

    assert result.exit_code == 1
    assert "lineloc check" in result.output


def test_unsupported_project_version(runner, tmp_path):
    project = tmp_path / "old.lineproject"
    project.write_text(json.dumps({"projectFileVersion": 1, "baseLanguage": "en"}), encoding="utf-8")

    result = invoke(runner, "show", "-p", str(project))

    assert result.exit_code == 1
    assert "upgrading" in result.output
