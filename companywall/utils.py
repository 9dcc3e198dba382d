# utils.py
# -*- coding: utf-8 -*-

"""
Utility functions for companywall
"""

import re
from pathlib import Path

from companywall.exceptions import FileError, ValidationError
from companywall.constants import (
    ALLOWED_EXCEL_EXTENSIONS,
    MAX_FILE_SIZE_MB,
    MAX_QUERY_LENGTH,
    MIN_QUERY_LENGTH,
)


def validate_file_path(file_path: str, must_exist: bool = False) -> Path:
    """
    Validate a file path.

    Args:
        file_path: Path to validate
        must_exist: If True, the file has to exist

    Returns:
        Resolved Path

    Raises:
        ValidationError: If the path cannot be parsed
        FileError: If the file does not exist (when must_exist=True)
    """
    if not file_path or not isinstance(file_path, str):
        raise ValidationError("Invalid file path", field="file_path")

    try:
        path = Path(file_path).resolve()
    except (OSError, ValueError) as e:
        raise ValidationError(f"Cannot parse file path: {e}", field="file_path")

    if must_exist and not path.exists():
        raise FileError(f"File does not exist: {file_path}", file_path=str(path))

    return path


def validate_excel_file(file_path: str) -> Path:
    """
    Validate an Excel file path, extension and size.

    Raises:
        ValidationError: If it is not an Excel file
        FileError: If the file is missing, locked or too large
    """
    path = validate_file_path(file_path, must_exist=True)

    if path.suffix.lower() not in ALLOWED_EXCEL_EXTENSIONS:
        raise ValidationError(
            f"File must have extension: {', '.join(ALLOWED_EXCEL_EXTENSIONS)}",
            field="file_path"
        )

    try:
        file_size_mb = path.stat().st_size / (1024 * 1024)
    except PermissionError:
        raise FileError(
            "File is in use by another application. Close it and try again.",
            file_path=str(path)
        )
    except OSError as e:
        raise FileError(f"Cannot stat file: {e}", file_path=str(path))

    if file_size_mb > MAX_FILE_SIZE_MB:
        raise FileError(
            f"File too large ({file_size_mb:.2f}MB). Maximum: {MAX_FILE_SIZE_MB}MB",
            file_path=str(path)
        )

    return path


def sanitize_filename(filename: str) -> str:
    sanitized = re.sub(r'[<>:"|?*]', '', filename)
    sanitized = sanitized.strip()
    if len(sanitized) > 255:
        sanitized = sanitized[:255]
    return sanitized


def sanitize_query(query: str) -> str:
    """
    Trim a search query and cap its length.

    Returns:
        The cleaned query, or "" when nothing usable is left
    """
    if not query or not isinstance(query, str):
        return ""

    sanitized = " ".join(query.split())

    if len(sanitized) > MAX_QUERY_LENGTH:
        sanitized = sanitized[:MAX_QUERY_LENGTH]

    if len(sanitized) < MIN_QUERY_LENGTH:
        return ""

    return sanitized


def clean_oib(oib: str) -> str:
    """Drop spaces, dashes and anything else that is not a digit."""
    if not oib or not isinstance(oib, str):
        return ""
    return ''.join(c for c in oib if c.isdigit())


def is_oib(value: str) -> bool:
    """True when value is exactly 11 digits (the OIB shape)."""
    return bool(value) and isinstance(value, str) and len(value) == 11 and value.isdigit()


def digits_only(value: str) -> str:
    return ''.join(c for c in value if c.isdigit()) if value else ""
