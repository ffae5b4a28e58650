"""CSV and JSON writers for export rows.

Files are always created fresh (overwritten) and closed before the writer
returns, including when there are no rows.
"""

import csv
import json
from pathlib import Path
from typing import Iterable, Sequence, Union

import structlog

from modules.audit_export.errors import ExportWriteError

logger = structlog.get_logger()

PathLike = Union[str, Path]


def _checked_rows(
    header: Sequence[str], rows: Iterable[Sequence[str]]
) -> list[list[str]]:
    checked = []
    for index, row in enumerate(rows):
        if len(row) != len(header):
            raise ValueError(
                f"row {index} has {len(row)} fields, header has {len(header)}"
            )
        checked.append(list(row))
    return checked


def _prepare(path: PathLike) -> Path:
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportWriteError(
            f"Failed to create directory {target.parent}: {e}", str(target)
        ) from e
    return target


def write_csv(
    path: PathLike,
    header: Sequence[str],
    rows: Iterable[Sequence[str]],
) -> Path:
    """Write a header row followed by one row per record.

    Args:
        path: Output file, replaced if it exists
        header: Column names
        rows: Rows whose length matches the header

    Returns:
        Path of the written file

    Raises:
        ValueError: If a row does not match the header length
        ExportWriteError: If the file cannot be written
    """
    data = _checked_rows(header, rows)
    target = _prepare(path)
    try:
        with target.open("w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(list(header))
            writer.writerows(data)
    except OSError as e:
        logger.error("csv_write_failed", path=str(target), error=str(e))
        raise ExportWriteError(f"Failed to write CSV file {target}: {e}", str(target)) from e

    logger.info("csv_written", path=str(target), rows=len(data))
    return target


def write_json(
    path: PathLike,
    header: Sequence[str],
    rows: Iterable[Sequence[str]],
) -> Path:
    """Write rows as a JSON array of objects keyed by header name.

    The array is indented by two spaces; zero rows produce ``[]``.
    """
    records = [dict(zip(header, row)) for row in _checked_rows(header, rows)]
    target = _prepare(path)
    try:
        with target.open("w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        logger.error("json_write_failed", path=str(target), error=str(e))
        raise ExportWriteError(
            f"Failed to write JSON file {target}: {e}", str(target)
        ) from e

    logger.info("json_written", path=str(target), rows=len(records))
    return target
