"""Utility functions for farewell_desk.

This module contains internal utility functions.
"""

from farewell_desk.utils.ids import (
    MAX_CODE_INDEX,
    MAX_CODE_NUMBER,
    format_removal_code,
    time_based_id,
)

__all__ = [
    "MAX_CODE_INDEX",
    "MAX_CODE_NUMBER",
    "format_removal_code",
    "time_based_id",
]
