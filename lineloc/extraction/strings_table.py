"""Reader for CSV strings tables (one row per line ID)."""

import csv
import io
from pathlib import Path
from typing import Dict

ID_COLUMN = "id"
TEXT_COLUMN = "text"


class StringsTableReader:
    """
    Reads a strings table into a line ID -> text mapping.

    The table needs `id` and `text` columns; any other columns (language,
    file, node, lineNumber, lock, comment) are ignored.
    """

    def read(self, file_path: str) -> Dict[str, str]:
        """
        Read a strings table from disk.

        Args:
            file_path: Path to the CSV file

        Returns:
            Dictionary of {line_id: text}
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        # utf-8-sig drops the BOM spreadsheet tools like to add
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            return self._read_rows(f, str(path))

    def read_string(self, content: str) -> Dict[str, str]:
        """Read a strings table from CSV text."""
        return self._read_rows(io.StringIO(content), "<string>")

    def _read_rows(self, stream, source: str) -> Dict[str, str]:
        reader = csv.DictReader(stream)
        columns = reader.fieldnames or []

        missing = [c for c in (ID_COLUMN, TEXT_COLUMN) if c not in columns]
        if missing:
            raise ValueError(f"Strings table {source} is missing columns: {', '.join(missing)}")

        table = {}
        for row_number, row in enumerate(reader, start=2):
            line_id = (row.get(ID_COLUMN) or "").strip()
            if not line_id:
                continue
            if line_id in table:
                raise ValueError(f"Duplicate line ID {line_id!r} in {source} (row {row_number})")
            table[line_id] = row.get(TEXT_COLUMN) or ""

        return table
