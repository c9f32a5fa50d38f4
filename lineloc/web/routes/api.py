"""REST API routes."""

from pathlib import Path
from typing import Optional
from fastapi import APIRouter, Request, HTTPException
from pydantic import BaseModel

from ...config import config
from ...errors import (
    DuplicateLanguageError,
    LineNotReadyError,
    PathOutsideProjectError,
    UnknownLineIDError,
)
from ...models.line import LocalizedLine
from ...models.localization import LocalizationEntry
from ...models.markup import MarkupParseResult

router = APIRouter()


# Request models
class AddLocalizationRequest(BaseModel):
    language: str
    strings_file: Optional[str] = None
    assets_folder: Optional[str] = None


class UpdateLocalizationRequest(BaseModel):
    strings_file: Optional[str] = None
    assets_folder: Optional[str] = None
    new_language: Optional[str] = None


class BaseLanguageRequest(BaseModel):
    language: str


class PrepareLinesRequest(BaseModel):
    line_ids: list[str]
    language: Optional[str] = None


def _session(request: Request):
    return request.app.state.session


def _resolve_input_path(session, value: Optional[str]) -> Optional[Path]:
    """Paths in requests are relative to the project root unless absolute."""
    if not value:
        return None
    path = Path(value)
    if not path.is_absolute():
        path = session.project_root / path
    if not path.exists():
        raise HTTPException(400, f"Path does not exist: {value}")
    return path


def _entry_to_dict(session, entry: LocalizationEntry) -> dict:
    return {
        "language": entry.language_id,
        "display_name": config.format_language(entry.language_id),
        "strings_file": str(entry.strings_file) if entry.strings_file else None,
        "assets_folder": str(entry.assets_folder) if entry.assets_folder else None,
        "is_base": session.is_base_language(entry.language_id),
        "modified": entry.language_id in session.modified,
        "broken_paths": session.broken_paths.get(entry.language_id, []),
    }


def _project_to_dict(session) -> dict:
    data = session.data
    return {
        "project": str(session.project_path),
        "base_language": data.base_language,
        "localizations": {
            lang: {"strings": info.strings, "assets": info.assets}
            for lang, info in sorted(data.localizations.items())
        },
        "has_modifications": session.has_modifications,
    }


def _markup_to_dict(result: MarkupParseResult) -> dict:
    return {
        "text": result.text,
        "attributes": [
            {
                "name": a.name,
                "position": a.position,
                "length": a.length,
                "properties": a.properties,
            }
            for a in result.attributes
        ],
    }


def _line_to_dict(line: LocalizedLine, error: Optional[str]) -> dict:
    return {
        "id": line.id,
        "raw_text": line.raw_text,
        "substitutions": line.substitutions,
        "status": line.status.value,
        "character_name": line.character_name,
        "text": _markup_to_dict(line.text),
        "text_without_character_name": _markup_to_dict(line.text_without_character_name),
        "audio": str(line.audio.asset) if line.audio else None,
        "error": error,
    }


# Project endpoints
@router.get("/project")
async def get_project(request: Request):
    """Get the applied project localization settings."""
    return _project_to_dict(_session(request))


@router.get("/localizations")
async def list_localizations(request: Request):
    """List the working set of localizations, including unapplied edits."""
    session = _session(request)
    return {
        "base_language": session.base_language,
        "has_modifications": session.has_modifications,
        "localizations": [_entry_to_dict(session, e) for e in session.entries],
    }


@router.post("/localizations", status_code=201)
async def add_localization(request: Request, body: AddLocalizationRequest):
    """Add a localization to the working set."""
    session = _session(request)
    try:
        entry = session.add_localization(
            body.language,
            strings_file=_resolve_input_path(session, body.strings_file),
            assets_folder=_resolve_input_path(session, body.assets_folder),
        )
    except DuplicateLanguageError as e:
        raise HTTPException(409, str(e))
    return _entry_to_dict(session, entry)


@router.patch("/localizations/{language}")
async def update_localization(request: Request, language: str, body: UpdateLocalizationRequest):
    """
    Edit a localization in the working set.

    Only fields present in the body are changed; an explicit null clears a path.
    """
    session = _session(request)
    changes = {}
    if "strings_file" in body.model_fields_set:
        changes["strings_file"] = _resolve_input_path(session, body.strings_file)
    if "assets_folder" in body.model_fields_set:
        changes["assets_folder"] = _resolve_input_path(session, body.assets_folder)
    if body.new_language:
        changes["new_language_id"] = body.new_language

    try:
        entry = session.update_localization(language, **changes)
    except KeyError:
        raise HTTPException(404, f"No localization for {language}")
    except DuplicateLanguageError as e:
        raise HTTPException(409, str(e))
    return _entry_to_dict(session, entry)


@router.delete("/localizations/{language}")
async def remove_localization(request: Request, language: str):
    """Remove a localization from the working set."""
    session = _session(request)
    try:
        session.remove_localization(language)
    except KeyError:
        raise HTTPException(404, f"No localization for {language}")
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"status": "removed"}


@router.put("/base-language")
async def set_base_language(request: Request, body: BaseLanguageRequest):
    """Change the base language in the working set."""
    session = _session(request)
    session.set_base_language(body.language)
    return {"base_language": session.base_language, "has_modifications": session.has_modifications}


@router.post("/apply")
async def apply_changes(request: Request):
    """Commit the working set and save the project file."""
    session = _session(request)
    try:
        session.apply()
    except (PathOutsideProjectError, DuplicateLanguageError) as e:
        raise HTTPException(400, str(e))

    request.app.state.preview.invalidate()
    return _project_to_dict(session)


@router.post("/revert")
async def revert_changes(request: Request):
    """Discard unapplied edits."""
    session = _session(request)
    session.revert()
    return _project_to_dict(session)


# Line preview endpoints
@router.post("/lines/prepare", status_code=202)
async def prepare_lines(request: Request, body: PrepareLinesRequest):
    """Start preparing lines. Poll /lines/status until they are available."""
    preview = request.app.state.preview
    try:
        provider = preview.provider(body.language)
    except (FileNotFoundError, ValueError) as e:
        # ReferenceNotFoundError is a FileNotFoundError
        raise HTTPException(400, str(e))

    provider.prepare_for_lines(body.line_ids)
    return {
        "language": provider.current_text_language_code,
        "count": len(set(body.line_ids)),
    }


@router.get("/lines/status")
async def lines_status(request: Request):
    """Check whether the last prepared batch is available."""
    provider = request.app.state.preview.current
    if provider is None:
        return {"lines_available": False, "language": None}
    return {
        "lines_available": provider.lines_available,
        "language": provider.current_text_language_code,
    }


@router.get("/lines/{line_id}")
async def get_line(request: Request, line_id: str):
    """Get a prepared line."""
    provider = request.app.state.preview.current
    if provider is None:
        raise HTTPException(409, "No lines have been prepared")

    try:
        line = provider.get_localized_line(line_id)
    except LineNotReadyError as e:
        raise HTTPException(409, str(e))
    except UnknownLineIDError as e:
        raise HTTPException(404, str(e))

    return _line_to_dict(line, provider.line_error(line_id))
