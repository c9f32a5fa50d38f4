"""Command-line interface for editing project localizations and previewing lines."""

import click
from pathlib import Path
from typing import Optional, Tuple
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from . import __version__
from .config import config, PATH_STYLES
from .errors import LocalizationError, ReferenceNotFoundError
from .extraction.strings_table import StringsTableReader
from .lines.database import LocalizationDatabase
from .lines.provider import LineProviderCache
from .log import configure_logging
from .project.paths import PathResolver
from .project.session import LocalizationEditSession

console = Console()

# Errors a user can fix by changing their input or their files
USER_ERRORS = (LocalizationError, ValueError, KeyError, FileNotFoundError)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.option(
    "--path-style",
    type=click.Choice(PATH_STYLES),
    default=None,
    help="How paths are stored in the project file (defaults to LINELOC_PATH_STYLE)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, path_style: Optional[str]):
    """Manage a project's localizations and preview localized lines."""
    configure_logging("verbose" if verbose else config.log_level, console=Console(stderr=True))

    errors = config.validate()
    if errors:
        console.print("[red]Configuration errors:[/red]")
        for error in errors:
            console.print(f"  - {error}")
        raise click.Abort()

    ctx.obj = {"resolver": PathResolver(style=path_style)}


def _project_option(f):
    return click.option(
        "--project", "-p",
        "project_path",
        required=True,
        type=click.Path(exists=True, dir_okay=False),
        help="Path to the project file",
    )(f)


def _load_session(ctx: click.Context, project_path: str) -> LocalizationEditSession:
    try:
        return LocalizationEditSession.load(project_path, resolver=ctx.obj["resolver"])
    except USER_ERRORS as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()


def _apply(session: LocalizationEditSession) -> None:
    try:
        session.apply()
    except USER_ERRORS as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print("[yellow]Project file left unchanged[/yellow]")
        raise click.Abort()
    console.print(f"[green]Saved:[/green] {session.project_path}")


@cli.command()
@_project_option
@click.pass_context
def show(ctx: click.Context, project_path: str):
    """Show the project's base language and localizations."""
    session = _load_session(ctx, project_path)
    data = session.data

    table = Table(title=f"Localizations for {Path(project_path).name}")
    table.add_column("Language", style="cyan")
    table.add_column("Strings")
    table.add_column("Assets")
    table.add_column("Notes", style="dim")

    for lang in data.languages():
        info = data.localizations.get(lang)
        notes = []
        if lang == data.base_language:
            notes.append("base language")
        if lang in session.broken_paths:
            notes.append("[red]broken path[/red]")

        if lang == data.base_language:
            strings = "[dim]not used[/dim]"
        else:
            strings = escape(info.strings) if info and info.strings else "[dim]-[/dim]"

        table.add_row(
            config.format_language(lang),
            strings,
            escape(info.assets) if info and info.assets else "[dim]-[/dim]",
            ", ".join(notes),
        )

    console.print(table)


@cli.command()
@_project_option
@click.pass_context
def check(ctx: click.Context, project_path: str):
    """Check that every stored path still resolves."""
    session = _load_session(ctx, project_path)

    if not session.broken_paths:
        console.print("[green]All localization paths resolve[/green]")
        return

    table = Table(show_header=True, title="Broken paths")
    table.add_column("Language", style="cyan")
    table.add_column("Stored path")

    for lang, paths in sorted(session.broken_paths.items()):
        for stored in paths:
            table.add_row(config.format_language(lang), escape(stored))

    console.print(table)
    ctx.exit(1)


@cli.command()
@_project_option
@click.option("--language", "-l", required=True, help="Language code to add (e.g., 'fr')")
@click.option("--strings", "strings_file", type=click.Path(exists=True, dir_okay=False), help="Strings table for this language")
@click.option("--assets", "assets_folder", type=click.Path(exists=True, file_okay=False), help="Folder of per-line assets")
@click.pass_context
def add(ctx: click.Context, project_path: str, language: str, strings_file: Optional[str], assets_folder: Optional[str]):
    """Add a localization to the project."""
    session = _load_session(ctx, project_path)
    try:
        session.add_localization(language, strings_file=strings_file, assets_folder=assets_folder)
    except USER_ERRORS as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()

    _apply(session)


@cli.command()
@_project_option
@click.option("--language", "-l", required=True, help="Language code to remove")
@click.pass_context
def remove(ctx: click.Context, project_path: str, language: str):
    """Remove a localization from the project."""
    session = _load_session(ctx, project_path)
    try:
        session.remove_localization(language)
    except USER_ERRORS as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()
    _apply(session)


@cli.command()
@_project_option
@click.option("--language", "-l", required=True, help="Language code to edit")
@click.option("--strings", "strings_file", type=click.Path(exists=True, dir_okay=False), help="New strings table")
@click.option("--assets", "assets_folder", type=click.Path(exists=True, file_okay=False), help="New assets folder")
@click.option("--clear-strings", is_flag=True, help="Remove the strings table")
@click.option("--clear-assets", is_flag=True, help="Remove the assets folder")
@click.option("--rename", "new_language", default=None, help="Change the language code")
@click.pass_context
def update(
    ctx: click.Context,
    project_path: str,
    language: str,
    strings_file: Optional[str],
    assets_folder: Optional[str],
    clear_strings: bool,
    clear_assets: bool,
    new_language: Optional[str],
):
    """Change a localization's strings table, assets folder or language code."""
    if strings_file and clear_strings:
        raise click.UsageError("--strings and --clear-strings are mutually exclusive")
    if assets_folder and clear_assets:
        raise click.UsageError("--assets and --clear-assets are mutually exclusive")

    changes = {}
    if strings_file or clear_strings:
        changes["strings_file"] = strings_file
    if assets_folder or clear_assets:
        changes["assets_folder"] = assets_folder
    if new_language:
        changes["new_language_id"] = new_language

    if not changes:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    session = _load_session(ctx, project_path)
    try:
        session.update_localization(language, **changes)
    except USER_ERRORS as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()
    _apply(session)


@cli.command("set-base")
@_project_option
@click.option("--language", "-l", required=True, help="New base language code")
@click.pass_context
def set_base(ctx: click.Context, project_path: str, language: str):
    """Change the project's base language."""
    session = _load_session(ctx, project_path)
    previous = session.base_language
    if previous == language:
        console.print(f"[green]Base language is already {config.format_language(language)}[/green]")
        return

    session.set_base_language(language)
    _apply(session)
    console.print(
        f"[blue]Base language:[/blue] {config.format_language(previous)} -> {config.format_language(language)}"
    )


@cli.command()
@_project_option
@click.option(
    "--base-strings", "-b",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Strings table holding the base language text",
)
@click.option("--language", "-l", default=None, help="Text language (defaults to LINELOC_TEXT_LANGUAGE)")
@click.option("--override", default=None, help="Language code override for this preview")
@click.option("--audio", is_flag=True, help="Also resolve audio assets")
@click.option("--limit", type=int, default=20, help="Limit number of lines to show")
@click.argument("line_ids", nargs=-1)
@click.pass_context
def preview(
    ctx: click.Context,
    project_path: str,
    base_strings: str,
    language: Optional[str],
    override: Optional[str],
    audio: bool,
    limit: int,
    line_ids: Tuple[str, ...],
):
    """Prepare lines through a line provider and show them as they would be presented."""
    session = _load_session(ctx, project_path)

    try:
        database = LocalizationDatabase.from_project(
            session.data,
            session.project_root,
            base_strings=StringsTableReader().read(base_strings),
            resolver=ctx.obj["resolver"],
        )
    except ReferenceNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print("[dim]Run 'lineloc check' to list broken paths[/dim]")
        raise click.Abort()
    except USER_ERRORS as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()

    ids = list(line_ids) or database.line_ids()[:limit]
    if not ids:
        console.print("[yellow]No lines to preview[/yellow]")
        return

    with LineProviderCache(
        database,
        text_language=language,
        text_language_code_override=override,
        include_audio=audio,
    ) as provider:
        with console.status(f"Preparing {len(ids)} lines in {provider.current_text_language_code}..."):
            provider.prepare_for_lines(ids).result()

        table = Table(title=f"Lines in {config.format_language(provider.current_text_language_code)}")
        table.add_column("ID", style="dim", max_width=30)
        table.add_column("Character", style="cyan")
        table.add_column("Text", max_width=60)
        if audio:
            table.add_column("Audio", max_width=30)
        table.add_column("Problem", style="yellow", max_width=40)

        unknown = []
        for line_id in ids:
            try:
                line = provider.get_localized_line(line_id)
            except LocalizationError:
                unknown.append(line_id)
                continue

            row = [
                line_id,
                escape(line.character_name or "-"),
                escape(line.text_without_character_name.text),
            ]
            if audio:
                row.append(line.audio.asset.name if line.audio else "[dim]-[/dim]")
            row.append(escape(provider.line_error(line_id) or ""))
            table.add_row(*row)

    console.print(table)

    if unknown:
        console.print(Panel("\n".join(unknown), title="Unknown line IDs", border_style="red"))


if __name__ == "__main__":
    cli()
