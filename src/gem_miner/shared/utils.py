"""
Utilities Module - Common helper functions.
==========================================

Provides utility functions for:
- File I/O (text lines, JSON)
- Numeric parsing of loosely formatted source values
- Text helpers shared by the loaders
"""

import json
import re
from pathlib import Path
from typing import Any, Optional

from gem_miner.shared.logging import get_logger

logger = get_logger(__name__)

_YEAR_PATTERN = re.compile(r"\b(\d{4})\b")


# ─────────────────────────────────────────────────────────────────────────────
# File I/O
# ─────────────────────────────────────────────────────────────────────────────


def read_text_lines(file_path: Path) -> list[str]:
    """
    Read a UTF-8 text file into a list of non-blank lines.

    A leading byte-order mark is dropped and trailing carriage returns are
    stripped, so files exported from spreadsheets parse like any other.

    Args:
        file_path: Path to text file

    Returns:
        Lines with line endings removed (blank lines skipped)

    Raises:
        FileNotFoundError: If file doesn't exist
        UnicodeDecodeError: If file is not valid UTF-8
    """
    file_path = Path(file_path)

    with open(file_path, "r", encoding="utf-8-sig") as f:
        return [line.rstrip("\r\n") for line in f if line.strip()]


def load_json(file_path: Path) -> Any:
    """
    Load data from a JSON file.

    Args:
        file_path: Path to JSON file

    Returns:
        Parsed JSON data

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
    """
    file_path = Path(file_path)

    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


# ─────────────────────────────────────────────────────────────────────────────
# Value Parsing
# ─────────────────────────────────────────────────────────────────────────────


def parse_float(value: Optional[str]) -> Optional[float]:
    """
    Parse a numeric cell.

    Args:
        value: Raw cell text

    Returns:
        The float value, or None for empty or non-numeric text

    Example:
        >>> parse_float("4.25")
        4.25
        >>> parse_float("n/a") is None
        True
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if number != number:  # NaN
        return None
    return number


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer count, tolerating float formatting like ``"12.0"``."""
    number = parse_float(value)
    return int(number) if number is not None else None


def extract_years(text: str) -> list[int]:
    """
    Extract all four-digit years mentioned in a text.

    Example:
        >>> extract_years("2026 Spring")
        [2026]
    """
    return [int(y) for y in _YEAR_PATTERN.findall(text or "")]


# ─────────────────────────────────────────────────────────────────────────────
# Text Utilities
# ─────────────────────────────────────────────────────────────────────────────


def contains_ci(haystack: Optional[str], needle: str) -> bool:
    """Case-insensitive substring test; a missing haystack never matches."""
    if not haystack:
        return False
    return needle.lower() in haystack.lower()


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix
