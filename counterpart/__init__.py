"""
Counterpart
===========

Repository consistency checker for a database-backed code generation project.

The checked repository keeps its database objects as one SQL file per object
and a class library generated from the database schema. Naming conventions tie
these artifacts together: every row-level-security function and every
security policy refers to a table, and every generated library folder refers
to a schema. Counterpart reports the artifacts whose counterpart is missing.

Main Components:
    - validators: naming rules and the repository cross-reference validator
    - builders: generated library build/update through external tools
    - database: remote database test-suite execution
    - pipeline: concurrent work orchestration
    - core: configuration, logging, exceptions, CLI helpers

Primary Interfaces:
    - counterpart.cli: `counterpart` command line entry point
    - counterpart.validators.repo.RepoValidator: programmatic checks

Example Usage:
    >>> from pathlib import Path
    >>> from counterpart.core.config import RepoLayout
    >>> from counterpart.validators.repo import RepoValidator
    >>> validator = RepoValidator(RepoLayout().resolve(Path("/src/project")))
    >>> violations = validator.validate_all()
    >>> violations.policies_missing_table
    []
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
