"""Line providers: prepare localized lines in the background, serve them on demand."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Protocol, Sequence, Tuple

from ..config import config
from ..errors import LineNotReadyError, UnknownLineIDError
from ..extraction.markup_parser import MarkupParser, expand_substitutions
from ..models.line import LineAudio, LineStatus, LocalizedLine
from ..models.markup import MarkupParseResult

logger = logging.getLogger(__name__)


class LineSource(Protocol):
    """Where line text and substitution values come from."""

    def get_raw_text(self, line_id: str, language_code: str) -> Optional[str]: ...

    def get_substitutions(self, line_id: str) -> Sequence[str]: ...

    def has_line(self, line_id: str) -> bool: ...


class AudioLineSource(LineSource, Protocol):
    """A line source that can also locate per-line audio assets."""

    def get_audio_asset(self, line_id: str, language_code: str) -> Optional[Path]: ...


class LineProvider(Protocol):
    """Produces LocalizedLines for a dialogue consumer."""

    def prepare_for_lines(self, line_ids: Iterable[str]) -> "Future[bool]": ...

    @property
    def lines_available(self) -> bool: ...

    def get_localized_line(
        self, line_id: str, substitutions: Optional[Sequence[str]] = None
    ) -> LocalizedLine: ...


@dataclass
class _PreparedLine:
    line_id: str
    raw_text: str = ""
    substitutions: List[str] = field(default_factory=list)
    text: Optional[MarkupParseResult] = None
    audio: Optional[LineAudio] = None
    error: Optional[str] = None
    exists: bool = True


class LineProviderCache:
    """
    Resolves a batch of line IDs on a worker thread, then serves them from memory.

    Each call to `prepare_for_lines` supersedes the previous one: readiness
    drops immediately, and a batch that finishes after a newer request was
    made is thrown away. The requested ID set, the resolved lines and the
    ready flag are only ever swapped together under one lock.

    Per-line failures (missing text, missing audio, bad markup) do not fail
    the batch. The line is still served, with whatever could be resolved,
    and the failure is available from `line_error`.
    """

    def __init__(
        self,
        source: LineSource,
        text_language: Optional[str] = None,
        text_language_code_override: Optional[str] = None,
        include_audio: bool = False,
        max_workers: Optional[int] = None,
        markup_parser: Optional[MarkupParser] = None,
    ):
        """
        Initialize the provider.

        Args:
            source: Where to read line text from
            text_language: Selected text language (defaults to config)
            text_language_code_override: Language to use instead of the selected one
            include_audio: Resolve an audio asset for every line
            max_workers: Background worker threads (defaults to config)
            markup_parser: Parser for line markup
        """
        self.source = source
        self.text_language = text_language or config.text_language
        if text_language_code_override is None:
            text_language_code_override = config.text_language_override
        self.text_language_code_override = text_language_code_override or ""
        self.include_audio = include_audio
        self.markup_parser = markup_parser or MarkupParser()

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or config.prepare_workers,
            thread_name_prefix="lineloc-prepare",
        )
        self._lock = threading.Lock()
        self._generation = 0
        self._requested: FrozenSet[str] = frozenset()
        self._lines: Dict[str, _PreparedLine] = {}
        self._ready = False

        if self.text_language_code_override.strip():
            logger.warning(
                "Line provider is ignoring the selected text language %r and using "
                "the override %r",
                self.text_language, self.text_language_code_override,
            )

    @property
    def current_text_language_code(self) -> str:
        """The language lines are read in: the override if set, else the selected language."""
        if self.text_language_code_override.strip():
            return self.text_language_code_override.strip()
        return self.text_language

    @property
    def lines_available(self) -> bool:
        """True once the most recent prepare request has fully resolved."""
        with self._lock:
            return self._ready

    def prepare_for_lines(self, line_ids: Iterable[str]) -> "Future[bool]":
        """
        Start resolving a batch of lines. Does not block.

        Args:
            line_ids: IDs of the lines the consumer expects to need

        Returns:
            Future resolving to True if this batch became the available one,
            or False if a newer request superseded it
        """
        requested = frozenset(line_ids)
        language = self.current_text_language_code

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._requested = requested
            self._lines = {}
            self._ready = False

        logger.debug("Preparing %d lines in %s (request %d)", len(requested), language, generation)
        return self._executor.submit(self._prepare, generation, requested, language)

    def _prepare(self, generation: int, requested: FrozenSet[str], language: str) -> bool:
        lines = {line_id: self._resolve(line_id, language) for line_id in sorted(requested)}

        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding superseded request %d", generation)
                return False
            self._lines = lines
            self._ready = True

        failed = sum(1 for line in lines.values() if line.error)
        logger.debug("Request %d ready: %d lines, %d with errors", generation, len(lines), failed)
        return True

    def _resolve(self, line_id: str, language: str) -> _PreparedLine:
        prepared = _PreparedLine(line_id=line_id)
        try:
            if not self.source.has_line(line_id):
                prepared.exists = False
                return prepared

            prepared.substitutions = list(self.source.get_substitutions(line_id) or [])

            raw_text = self.source.get_raw_text(line_id, language)
            if raw_text is None:
                prepared.error = f"No text for line {line_id!r} in {language!r}"
            else:
                prepared.raw_text = raw_text

            prepared.text, parse_error = self._parse(prepared.raw_text, prepared.substitutions)
            prepared.error = prepared.error or parse_error

            if self.include_audio:
                asset = self.source.get_audio_asset(line_id, language)
                if asset is None:
                    prepared.error = prepared.error or f"No audio asset for line {line_id!r} in {language!r}"
                else:
                    prepared.audio = LineAudio(asset=Path(asset), language=language)
        except Exception as e:
            prepared.error = f"Failed to resolve line {line_id!r}: {e}"
            if prepared.text is None:
                prepared.text = MarkupParseResult(text=prepared.raw_text)

        if prepared.error:
            logger.warning("%s", prepared.error)
        return prepared

    def _parse(self, raw_text: str, substitutions: Sequence[str]) -> Tuple[MarkupParseResult, Optional[str]]:
        expanded = expand_substitutions(raw_text, substitutions)
        try:
            return self.markup_parser.parse(expanded), None
        except ValueError as e:
            return MarkupParseResult(text=expanded), f"Invalid markup: {e}"

    def get_localized_line(
        self, line_id: str, substitutions: Optional[Sequence[str]] = None
    ) -> LocalizedLine:
        """
        Get a prepared line. Only valid once `lines_available` is True.

        Args:
            line_id: ID of the line
            substitutions: Values to use instead of the prepared ones

        Raises:
            LineNotReadyError: If the latest batch has not finished resolving
            UnknownLineIDError: If the line was not in the latest batch, or
                the line source has no such line
        """
        with self._lock:
            if not self._ready:
                raise LineNotReadyError("Lines are not available yet; wait for lines_available")
            if line_id not in self._requested:
                raise UnknownLineIDError(line_id)
            prepared = self._lines[line_id]

        if not prepared.exists:
            raise UnknownLineIDError(line_id, "does not exist in the line source")

        text = prepared.text
        line_substitutions = list(prepared.substitutions)
        if substitutions is not None:
            line_substitutions = [str(s) for s in substitutions]
            text, parse_error = self._parse(prepared.raw_text, line_substitutions)
            if parse_error:
                logger.warning("Line %r: %s", line_id, parse_error)

        return LocalizedLine(
            id=line_id,
            raw_text=prepared.raw_text,
            text=text,
            substitutions=line_substitutions,
            status=LineStatus.PENDING,
            audio=prepared.audio,
        )

    def line_error(self, line_id: str) -> Optional[str]:
        """Why a prepared line could not be fully resolved, if it couldn't."""
        with self._lock:
            prepared = self._lines.get(line_id)
        return prepared.error if prepared else None

    def close(self, wait: bool = True) -> None:
        """Stop the background workers."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "LineProviderCache":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def text_line_provider(source: LineSource, **kwargs) -> LineProviderCache:
    """A provider that resolves line text only."""
    return LineProviderCache(source, include_audio=False, **kwargs)


def audio_line_provider(source: AudioLineSource, **kwargs) -> LineProviderCache:
    """A provider that also attaches each line's audio asset."""
    return LineProviderCache(source, include_audio=True, **kwargs)
