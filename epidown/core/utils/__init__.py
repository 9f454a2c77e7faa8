"""
Core utilities module.

Contains common utility functions used across the application.
"""

from epidown.core.utils.call_result import CallResult, attempt
from epidown.core.utils.timezone_utils import (
    format_datetime_iso,
    get_utc_now,
    to_utc,
)

__all__ = [
    'CallResult',
    'attempt',
    'get_utc_now',
    'to_utc',
    'format_datetime_iso',
]
