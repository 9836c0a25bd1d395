#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Counterpart project.

Exception Hierarchy:
    Exception (built-in)
    └── CounterpartError - Base for all project errors
        ├── StructuralError - A required directory cannot be listed or walked
        ├── ConfigurationError - Invalid or incomplete settings
        └── CollaboratorError - Base for external tool failures
            ├── BuildError - Generated library failed to compile
            ├── GenerateError - Library generator failed
            └── DatabaseTestError - Database test suite failed

A missing counterpart file is not an exception. Validators collect those as
violations and keep going; only structural problems abort a check.

Usage:
    from counterpart.core.exceptions import StructuralError

    try:
        violations = validator.validate_all()
    except StructuralError as e:
        logger.log_error(e, {"path": str(e.path)})
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class CounterpartError(Exception):
    """
    Base exception for all Counterpart errors.

    Catch this to handle any failure raised by the project; CLI commands
    route it through ``handle_cli_error``.
    """

    pass


class StructuralError(CounterpartError):
    """
    Exception for directories that cannot be listed or walked.

    Raised when a check cannot read its input: missing directory, wrong
    path, or insufficient permissions. Retrying will not help.

    Attributes:
        path: Directory or file that could not be read (if known)

    Examples:
        >>> raise StructuralError("cannot list directory", path=Path("/repo/Tables"))
    """

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigurationError(CounterpartError):
    """
    Exception for invalid or incomplete settings.

    Raised when a required setting (repository path, generator repository,
    connection details) is missing, or a config file cannot be parsed.

    Examples:
        >>> raise ConfigurationError("Repository path is not set")
    """

    pass


class CollaboratorError(CounterpartError):
    """
    Base exception for external tool failures.

    Attributes:
        output: Diagnostic text captured from the tool (may be empty)
    """

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class BuildError(CollaboratorError):
    """
    Exception for generated library compilation failures.

    msbuild writes its diagnostics to stdout, so the message carries the
    captured stdout rather than a generic exit status.
    """

    pass


class GenerateError(CollaboratorError):
    """Exception for library generator failures."""

    pass


class DatabaseTestError(CollaboratorError):
    """
    Exception for failed database test runs.

    Raised when the test suite reports failures or the database cannot be
    reached. The detailed test output, when it could be captured, is kept
    in ``output``.
    """

    pass
