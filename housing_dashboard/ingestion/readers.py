"""
File readers for the import pipelines.

Uploads are streamed to a scratch directory, read into row dictionaries with
pandas (CSV, or the first sheet of an Excel workbook through openpyxl) and
deleted once processed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

import pandas as pd
from fastapi import UploadFile

from .errors import ImportFileError, UploadTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

_KINDS = {
    ".csv": "csv",
    ".xlsx": "excel",
    ".xls": "excel",
    ".pdf": "pdf",
    ".doc": "word",
    ".docx": "word",
    ".txt": "text",
}


def file_kind(filename: Optional[str]) -> str:
    """Classify a file by extension: csv, excel, pdf, word, text or unknown."""
    return _KINDS.get(Path(filename or "").suffix.lower(), "unknown")


async def save_upload(upload: UploadFile, directory: str, max_size: int, prefix: str = "file") -> Path:
    """Stream an upload into the scratch directory.

    Args:
        upload: Incoming multipart file
        directory: Scratch directory, created when missing
        max_size: Size limit in bytes
        prefix: File name prefix

    Returns:
        Path of the written file

    Raises:
        UploadTooLargeError: If the upload exceeds ``max_size``; nothing is left on disk
    """
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    suffix = Path(upload.filename or "").suffix.lower()
    path = target_dir / f"{prefix}-{uuid4().hex}{suffix}"

    size = 0
    with path.open("wb") as handle:
        while chunk := await upload.read(CHUNK_SIZE):
            size += len(chunk)
            if size > max_size:
                break
            handle.write(chunk)

    if size > max_size:
        remove_file(path)
        raise UploadTooLargeError(f"File too large. Maximum size is {max_size // (1024 * 1024)}MB")

    logger.debug(f"Stored upload {upload.filename!r} at {path} ({size} bytes)")
    return path


def remove_file(path: Path) -> None:
    """Delete a scratch file if it still exists."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.error(f"Error deleting scratch file {path}: {e}")


def _clean_value(value: Any) -> Any:
    if isinstance(value, str):
        return value
    if pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    return value


def frame_to_rows(frame: pd.DataFrame) -> List[Dict[str, Any]]:
    """Convert a DataFrame into row dictionaries with plain Python values.

    Missing cells become None. Rows whose values are all empty are dropped.
    """
    rows = []
    for record in frame.astype(object).to_dict(orient="records"):
        row = {str(key): _clean_value(value) for key, value in record.items()}
        if any(value is not None and value != "" for value in row.values()):
            rows.append(row)
    return rows


def read_table(path: Path) -> List[Dict[str, Any]]:
    """Read a CSV file or the first sheet of an Excel workbook.

    CSV cells are read as text; Excel cells keep their numeric and date types.

    Raises:
        ImportFileError: If the file cannot be parsed
    """
    kind = file_kind(path.name)
    try:
        if kind == "csv":
            frame = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
        elif kind == "excel":
            frame = pd.read_excel(path, sheet_name=0)
        else:
            raise ImportFileError(f"Unsupported file type: {path.suffix or 'unknown'}")
    except ImportFileError:
        raise
    except pd.errors.EmptyDataError:
        return []
    except Exception as e:
        raise ImportFileError(f"Could not read file: {e}") from e
    return frame_to_rows(frame)
