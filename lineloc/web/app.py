"""FastAPI application for editing localizations and previewing lines."""

import uvicorn
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
from fastapi import FastAPI

from .. import __version__
from ..config import config
from ..log import configure_logging
from ..project.session import LocalizationEditSession
from .routes import api
from .services.preview_service import PreviewService


def create_app(
    project_path: Optional[str] = None,
    base_strings_path: Optional[str] = None,
    include_audio: bool = False,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        project_path: Project file to edit (defaults to LINELOC_PROJECT)
        base_strings_path: Strings table with the base language text, for previews
        include_audio: Resolve audio assets in previews
    """
    project_path = project_path or config.project_path
    if not project_path:
        raise ValueError("No project file given; pass one or set LINELOC_PROJECT")

    session = LocalizationEditSession.load(project_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.preview.close()

    app = FastAPI(
        title="lineloc",
        description="Project localization editor and line preview",
        version=__version__,
        lifespan=lifespan,
    )

    # Store services in app state
    app.state.session = session
    app.state.preview = PreviewService(
        session,
        base_strings_path=Path(base_strings_path) if base_strings_path else None,
        include_audio=include_audio,
    )

    app.include_router(api.router, prefix="/api")

    return app


def main():
    """Entry point for the lineloc-web command."""
    import argparse

    parser = argparse.ArgumentParser(description="Run the lineloc web API")
    parser.add_argument("project", nargs="?", default=None, help="Path to the project file")
    parser.add_argument("--base-strings", default=None, help="Strings table with the base language text")
    parser.add_argument("--audio", action="store_true", help="Resolve audio assets in previews")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")

    args = parser.parse_args()

    configure_logging(config.log_level)
    app = create_app(args.project, base_strings_path=args.base_strings, include_audio=args.audio)

    print(f"Starting lineloc at http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
