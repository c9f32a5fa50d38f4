"""Tests for stored path conversion."""

from pathlib import Path

import pytest

from lineloc.errors import PathOutsideProjectError, ReferenceNotFoundError
from lineloc.project.paths import PathResolver


def test_placeholder_style_inside_root(tmp_path, resolver):
    target = tmp_path / "Localisation" / "fr.csv"
    assert resolver.to_stored(target, tmp_path) == "${ProjectRoot}/Localisation/fr.csv"


def test_placeholder_style_root_itself(tmp_path, resolver):
    assert resolver.to_stored(tmp_path, tmp_path) == "${ProjectRoot}"


def test_placeholder_style_outside_root_is_absolute(tmp_path, resolver):
    root = tmp_path / "project"
    outside = tmp_path / "shared" / "fr.csv"
    assert resolver.to_stored(outside, root) == outside.as_posix()


def test_relative_style_inside_root(tmp_path, relative_resolver):
    target = tmp_path / "Audio" / "fr"
    assert relative_resolver.to_stored(target, tmp_path) == "Audio/fr"


def test_relative_style_outside_root_raises(tmp_path, relative_resolver):
    root = tmp_path / "project"
    with pytest.raises(PathOutsideProjectError) as exc_info:
        relative_resolver.to_stored(tmp_path / "elsewhere.csv", root)
    assert exc_info.value.project_root == root
    # Also usable as a plain ValueError
    assert isinstance(exc_info.value, ValueError)


def test_relative_reference_is_resolved_from_cwd(tmp_path, relative_resolver, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert relative_resolver.to_stored("Localisation/de.csv", tmp_path) == "Localisation/de.csv"


@pytest.mark.parametrize("stored", [
    "${ProjectRoot}/Localisation/fr.csv",
    "Localisation/fr.csv",
])
def test_to_reference_reads_both_forms(tmp_path, stored):
    target = tmp_path / "Localisation" / "fr.csv"
    target.parent.mkdir()
    target.write_text("id,text\n")
    # Either style reads either form
    for style in ("placeholder", "relative"):
        resolver = PathResolver(style=style, placeholder="${ProjectRoot}")
        assert resolver.to_reference(stored, tmp_path) == target


def test_to_reference_absolute(tmp_path, resolver):
    target = tmp_path / "fr.csv"
    target.write_text("")
    assert resolver.to_reference(target.as_posix(), tmp_path / "other") == Path(target.as_posix())


def test_to_reference_missing_raises(tmp_path, resolver):
    with pytest.raises(ReferenceNotFoundError) as exc_info:
        resolver.to_reference("${ProjectRoot}/gone.csv", tmp_path)
    assert exc_info.value.stored == "${ProjectRoot}/gone.csv"
    assert exc_info.value.resolved == tmp_path / "gone.csv"
    assert isinstance(exc_info.value, FileNotFoundError)


def test_stored_path_survives_moving_project(tmp_path, resolver):
    old_root = tmp_path / "old"
    new_root = tmp_path / "new"
    (old_root / "Audio").mkdir(parents=True)
    stored = resolver.to_stored(old_root / "Audio", old_root)

    old_root.rename(new_root)
    assert resolver.to_reference(stored, new_root) == new_root / "Audio"


def test_unknown_style_rejected():
    with pytest.raises(ValueError):
        PathResolver(style="absolute")
