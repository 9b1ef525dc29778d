"""Identifier utilities for farewell_desk.

This module provides the time-derived IDs used for chat messages and
notifications, and the removal code format.
"""

import string
import uuid
from datetime import datetime

__all__ = [
    "MAX_CODE_INDEX",
    "MAX_CODE_NUMBER",
    "format_removal_code",
    "time_based_id",
]

MAX_CODE_NUMBER = 999_999
_LETTERS = string.ascii_uppercase
# One-letter prefixes A-Z, then two-letter prefixes AA-ZZ
MAX_CODE_INDEX = (len(_LETTERS) + len(_LETTERS) ** 2) * MAX_CODE_NUMBER


def time_based_id(moment: datetime, suffix: str = "") -> str:
    """Generate a unique ID that sorts by creation time.

    Args:
        moment: Creation timestamp
        suffix: Optional tag appended to the ID (e.g. "closing")

    Returns:
        ID of the form ``<iso timestamp>-<random hex>[-suffix]``
    """
    token = f"{moment.isoformat()}-{uuid.uuid4().hex[:8]}"
    return f"{token}-{suffix}" if suffix else token


def format_removal_code(index: int) -> str:
    """Format the n-th removal code (1-based).

    Codes are a letter prefix followed by six digits: ``A000001`` through
    ``A999999``, then ``B000001`` and so on. After ``Z999999`` the prefix
    grows to two letters (``AA000001``), up to ``ZZ999999``.

    Args:
        index: 1-based sequence number

    Returns:
        Removal code

    Raises:
        ValueError: If index is not positive or beyond ``MAX_CODE_INDEX``
    """
    if index < 1:
        raise ValueError(f"Removal code index must be positive, got {index}")
    if index > MAX_CODE_INDEX:
        raise ValueError(f"Removal code space exhausted at index {index}")

    letter_index, remainder = divmod(index - 1, MAX_CODE_NUMBER)
    number = remainder + 1

    if letter_index < len(_LETTERS):
        prefix = _LETTERS[letter_index]
    else:
        first, second = divmod(letter_index, len(_LETTERS))
        prefix = _LETTERS[first - 1] + _LETTERS[second]

    return f"{prefix}{number:06d}"
