#!/usr/bin/env python3
"""
repo.py
-------
Repository cross-reference validator.

Checks that source artifacts following the project's naming conventions have
their counterpart elsewhere in the repository:

- Empty files: ``.sql``/``.cs`` files smaller than a few bytes
- RLS functions missing table: ``Security.fn_RLS_Read_<schema>_<object>.sql``
  without ``<schema>.<object>.sql`` in the tables directory
- Policies missing table: ``Security.<schema>_<object>.sql`` without
  ``<schema>.<object>.sql`` in the tables directory
- Libs missing schema: generated library folders without ``<folder>.sql``
  in the schemas directory

All checks only read the filesystem. Each one fills its own violation list,
so they may run concurrently. A directory that cannot be read raises
StructuralError and leaves that check's list untouched.

Usage (through CLI):
    counterpart repo all
    counterpart repo policies

Usage (programmatic):
    from counterpart.validators.repo import RepoValidator
"""
from __future__ import annotations

import json
import os
import stat
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

import click

from counterpart.core.config import RepoPaths
from counterpart.core.exceptions import StructuralError
from counterpart.core.logging_manager import CheckLogger, safe_logger
from counterpart.validators.naming import POLICY_RULE, RLS_FUNCTION_RULE, NamingRule

# Files below this many bytes count as empty (allows for a BOM or a newline)
EMPTY_FILE_THRESHOLD = 3
RECOGNIZED_EXTENSIONS = frozenset({".sql", ".cs"})


@dataclass
class ViolationSet:
    """Violations found in one validation run, in discovery order."""

    empty_files: List[str] = field(default_factory=list)
    functions_missing_table: List[str] = field(default_factory=list)
    policies_missing_table: List[str] = field(default_factory=list)
    libs_missing_schema: List[str] = field(default_factory=list)

    LABELS = (
        ("empty_files", "empty files"),
        ("functions_missing_table", "rls functions missing table"),
        ("policies_missing_table", "policies missing table"),
        ("libs_missing_schema", "libs missing schema"),
    )

    def sections(self) -> List[Tuple[str, List[str]]]:
        """(label, violations) pairs in report order."""
        return [(label, getattr(self, attr)) for attr, label in self.LABELS]

    @property
    def total(self) -> int:
        return sum(len(items) for _, items in self.sections())

    @property
    def is_clean(self) -> bool:
        return self.total == 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CrossReferenceRule:
    """
    A naming rule bound to the directories it relates.

    Attributes:
        rule: Naming rule applied to entries of ``source_dir``
        source_dir: Directory with files following the rule
        table_dir: Directory expected to hold the table counterparts
    """

    rule: NamingRule
    source_dir: Path
    table_dir: Path


def _extension(filename: str) -> str:
    """Suffix from the last dot, including it; empty when there is no dot."""
    dot = filename.rfind(".")
    return filename[dot:] if dot >= 0 else ""


def _list_dir(path: Path) -> List[os.DirEntry]:
    """
    List a directory's entries sorted by name.

    Raises:
        StructuralError: If the directory cannot be listed
    """
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise StructuralError(f"Cannot list directory {path}: {e}", path=Path(path)) from e


class RepoValidator:
    """Validates naming-convention counterparts in a repository checkout."""

    def __init__(
        self,
        paths: RepoPaths,
        logger: Optional[CheckLogger] = None,
        extensions: FrozenSet[str] = RECOGNIZED_EXTENSIONS,
        empty_threshold: int = EMPTY_FILE_THRESHOLD,
    ) -> None:
        """
        Initialize repository validator.

        Args:
            paths: Resolved repository directories
            logger: Optional logger instance
            extensions: File extensions subject to the empty-file check
            empty_threshold: Files smaller than this many bytes are empty
        """
        self.paths = paths
        self.logger = safe_logger(logger)
        self.extensions = frozenset(extensions)
        self.empty_threshold = empty_threshold
        self.violations = ViolationSet()

    @property
    def function_rule(self) -> CrossReferenceRule:
        return CrossReferenceRule(RLS_FUNCTION_RULE, self.paths.functions, self.paths.tables)

    @property
    def policy_rule(self) -> CrossReferenceRule:
        return CrossReferenceRule(POLICY_RULE, self.paths.policies, self.paths.tables)

    def checks(self) -> List[Tuple[str, Callable[[], List[str]]]]:
        """Named check callables, for scheduling by an orchestrator."""
        return [
            ("empty files", self.check_empty_files),
            ("rls functions missing tables", self.check_functions_missing_table),
            ("policies missing tables", self.check_policies_missing_table),
            ("libs missing schemas", self.check_libs_missing_schema),
        ]

    def validate_all(self) -> ViolationSet:
        """
        Run all four checks one after the other.

        Returns:
            Fresh violation set for this run

        Raises:
            StructuralError: From the first check that cannot read its input
        """
        self.violations = ViolationSet()
        for _, check in self.checks():
            check()
        return self.violations

    # ---- Empty files ----
    def check_empty_files(self) -> List[str]:
        """
        Find recognized files below the size threshold.

        Walks the tree under the repository root in lexical order, files and
        sub-directories interleaved by name. Symlinks are not followed;
        directories and unrecognized extensions are skipped.

        Returns:
            Paths of empty files, in walk order

        Raises:
            StructuralError: If any directory of the tree cannot be listed
        """
        root = self.paths.root
        self.logger.log_check("empty_files", root=str(root))

        found: List[str] = []
        try:
            self._collect_empty(root, found)
        except StructuralError as e:
            self.logger.log_error(e, {"check": "empty_files", "path": str(e.path)})
            raise

        self.violations.empty_files = found
        self.logger.log_check("empty_files", len(found))
        return found

    def _collect_empty(self, directory: Path, found: List[str]) -> None:
        for entry in _list_dir(directory):
            if entry.is_dir(follow_symlinks=False):
                self._collect_empty(Path(entry.path), found)
                continue
            if _extension(entry.name) not in self.extensions:
                continue

            try:
                info = entry.stat(follow_symlinks=False)
            except OSError as e:
                raise StructuralError(f"Cannot stat {entry.path}: {e}", path=Path(entry.path)) from e

            if stat.S_ISREG(info.st_mode) and info.st_size < self.empty_threshold:
                found.append(entry.path)

    # ---- Naming rule cross-reference ----
    def check_cross_reference(self, xref: CrossReferenceRule) -> List[str]:
        """
        Find files following a naming rule whose table file is missing.

        Entries that do not follow the rule are skipped. For each one that
        does, ``<schema>.<object>.sql`` is looked up in the table directory.

        Args:
            xref: Naming rule with its source and table directories

        Returns:
            Source filenames without a table, in directory order

        Raises:
            StructuralError: If either directory cannot be listed
        """
        self.logger.log_check(
            xref.rule.name, source=str(xref.source_dir), tables=str(xref.table_dir)
        )

        try:
            entries = _list_dir(xref.source_dir)
            _list_dir(xref.table_dir)
        except StructuralError as e:
            self.logger.log_error(e, {"check": xref.rule.name, "path": str(e.path)})
            raise

        missing: List[str] = []
        for entry in entries:
            identifier = xref.rule.extract(entry.name)
            if identifier is None:
                continue

            if not (xref.table_dir / identifier.table_filename).exists():
                missing.append(entry.name)

        self.logger.log_check(xref.rule.name, len(missing))
        return missing

    def check_functions_missing_table(self) -> List[str]:
        """RLS read functions whose table file is missing."""
        result = self.check_cross_reference(self.function_rule)
        self.violations.functions_missing_table = result
        return result

    def check_policies_missing_table(self) -> List[str]:
        """Security policies whose table file is missing."""
        result = self.check_cross_reference(self.policy_rule)
        self.violations.policies_missing_table = result
        return result

    # ---- Library folders ----
    def check_libs_missing_schema(self) -> List[str]:
        """
        Find generated library folders without a schema file.

        Only immediate sub-directories of the library root count; regular
        files and well-known infrastructure entries are skipped.

        Returns:
            Folder names without ``<name>.sql`` in the schemas directory

        Raises:
            StructuralError: If the library root cannot be listed
        """
        lib_root = self.paths.lib
        self.logger.log_check("libs_missing_schema", lib=str(lib_root), schemas=str(self.paths.schemas))

        try:
            entries = _list_dir(lib_root)
        except StructuralError as e:
            self.logger.log_error(e, {"check": "libs_missing_schema", "path": str(e.path)})
            raise

        missing: List[str] = []
        for entry in entries:
            if not entry.is_dir():
                continue
            if entry.name in self.paths.lib_exclusions:
                continue
            if not (self.paths.schemas / f"{entry.name}.sql").exists():
                missing.append(entry.name)

        self.violations.libs_missing_schema = missing
        self.logger.log_check("libs_missing_schema", len(missing))
        return missing


# ═══════════════════════════════════════════════════════════════════════════
# REPORTING
# ═══════════════════════════════════════════════════════════════════════════

def print_violation_report(violations: ViolationSet) -> None:
    """
    Print every non-empty violation list with its count and members.

    Empty lists print nothing.
    """
    for label, items in violations.sections():
        if not items:
            continue
        click.echo(f"{label}: {len(items)}")
        for item in items:
            click.echo(f"* {item}")
        click.echo()


def render_json(violations: ViolationSet, failures: Sequence[Tuple[str, str]] = ()) -> str:
    """
    Machine-readable report of a validation run.

    Args:
        violations: Violations of the checks that ran
        failures: (check name, error) pairs of checks that could not run
    """
    payload = {
        "violations": violations.to_dict(),
        "failures": [{"check": name, "error": error} for name, error in failures],
    }
    return json.dumps(payload, indent=2)
