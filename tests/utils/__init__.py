"""Test utilities for propbind.

This package provides exception testing helpers (exception_helpers.py).
"""

from .exception_helpers import (
    assert_exception_details,
    assert_exception_serialization,
    assert_exception_structure,
)

__all__ = [
    "assert_exception_details",
    "assert_exception_serialization",
    "assert_exception_structure",
]
