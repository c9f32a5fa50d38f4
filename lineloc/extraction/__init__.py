"""File formats: project files, strings tables and line markup."""

from .project_parser import ProjectFileParser
from .project_writer import ProjectFileWriter
from .strings_table import StringsTableReader
from .markup_parser import MarkupParser, expand_substitutions

__all__ = [
    "ProjectFileParser",
    "ProjectFileWriter",
    "StringsTableReader",
    "MarkupParser",
    "expand_substitutions",
]
