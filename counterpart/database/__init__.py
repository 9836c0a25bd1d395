#!/usr/bin/env python3
"""
Counterpart Database Package
----------------------------
Runs the tSQLt test suite of the project database.
"""

from .suite_runner import RUN_ALL_TESTS, DatabaseTestRunner
from counterpart.core.exceptions import DatabaseTestError

__all__ = [
    "DatabaseTestError",
    "DatabaseTestRunner",
    "RUN_ALL_TESTS",
]
