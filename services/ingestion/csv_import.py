"""Read an uploaded activity export (comma-separated, header row first) into raw rows."""
from __future__ import annotations

import csv
import io
import logging
from typing import Dict, List, Optional

from packages.errors import StructuralParseError

logger = logging.getLogger("trainlog.ingestion")

DATE_COLUMN = "Activity Date"

RawRow = Dict[str, Optional[str]]


def decode_upload(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise StructuralParseError(f"Upload is not UTF-8 text: {exc}") from exc


def read_activity_rows(text: str) -> List[RawRow]:
    """Split CSV text into header-keyed rows.

    Blank lines are skipped. A missing header, a header without the date
    column, or a row whose width differs from the header aborts the whole read.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    header: List[str] | None = None
    rows: List[RawRow] = []
    try:
        for record in reader:
            if not record or all(not cell.strip() for cell in record):
                continue
            if header is None:
                header = [cell.strip() for cell in record]
                if DATE_COLUMN not in header:
                    raise StructuralParseError(
                        f"Header row has no '{DATE_COLUMN}' column", line=reader.line_num
                    )
                continue
            if len(record) != len(header):
                raise StructuralParseError(
                    f"Row has {len(record)} fields, header has {len(header)}",
                    line=reader.line_num,
                )
            row: RawRow = {}
            for key, value in zip(header, record):
                # Exports repeat some column names (e.g. Distance); the first one wins.
                if key not in row:
                    row[key] = value
            rows.append(row)
    except csv.Error as exc:
        raise StructuralParseError(f"Malformed CSV: {exc}", line=reader.line_num) from exc

    if header is None:
        raise StructuralParseError("Upload is empty or has no header row")
    logger.info("csv_read rows=%d columns=%d", len(rows), len(header))
    return rows
