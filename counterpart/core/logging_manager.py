#!/usr/bin/env python3
"""
logging_manager.py
--------------------
Logging for check runs.

One ``CheckLogger`` per component writes:

- ``<component>.log``: every check, work item and collaborator record
- ``errors.log``: errors with their context and traceback, shared by all
  components

Records are single lines of the form ``KIND - subject: {json details}`` so
they can be grepped per check or per tool:

    CHECK - policies: {"phase": "start", "source": "/r/WigginDB/Security Policies"}
    CHECK - policies: {"phase": "done", "violations": 2}
    WORK - lib/build: {"status": "failed", "duration_ms": 5120}
    OPERATION - update_start: {"cmd": "dotnet"}
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# --- Third party imports ---
import click

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def _rotating_handler(path: Path, level: int, max_bytes: int, backup_count: int) -> logging.Handler:
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _bind(name: str, level: int, *handlers: logging.Handler) -> logging.Logger:
    """Named logger carrying exactly the given handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        logger.addHandler(handler)
    return logger


def _record(kind: str, subject: str, details: Optional[Dict[str, Any]]) -> str:
    if not details:
        return f"{kind} - {subject}"
    return f"{kind} - {subject}: {json.dumps(details, default=str)}"


class CheckLogger:
    """
    Logger for one component of a check run.

    Attributes:
        log_dir: Directory holding the log files
        component_name: Component name, also the log file stem
        main_logger: Logger for check, work and operation records
        error_logger: Logger writing only to ``errors.log``
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "counterpart",
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.log_dir.mkdir(parents=True, exist_ok=True)

        console = logging.StreamHandler()
        console.setLevel(logging.WARNING)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))

        self.main_logger = _bind(
            f"counterpart.{component_name}",
            logging.DEBUG,
            _rotating_handler(
                self.log_dir / f"{component_name}.log", logging.DEBUG, max_bytes, backup_count
            ),
            console,
        )
        self.error_logger = _bind(
            f"counterpart.{component_name}.errors",
            logging.ERROR,
            _rotating_handler(self.log_dir / "errors.log", logging.ERROR, max_bytes, backup_count),
        )
        # errors.log only; the CLI prints its own one-line message
        self.error_logger.propagate = False

    def log_check(
        self, check: str, violations: Optional[int] = None, **context: Any
    ) -> None:
        """
        Record the start of a repository check, or its result.

        Args:
            check: Check name (e.g. 'empty_files', 'policies')
            violations: Violation count; None marks the start of the check
            **context: Directories or rule names the check works on
        """
        details: Dict[str, Any] = {"phase": "start" if violations is None else "done"}
        if violations is not None:
            details["violations"] = violations
        details.update(context)
        self.main_logger.info(_record("CHECK", check, details))

    def log_work(self, group: str, name: str, status: str, **details: Any) -> None:
        """Record a work item transition in the runner."""
        self.main_logger.debug(_record("WORK", f"{group}/{name}", {"status": status, **details}))

    def log_operation(
        self, operation: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a collaborator or CLI operation (tool runs, settings, summaries)."""
        self.main_logger.info(_record("OPERATION", operation, details))

    def log_error(
        self, error: Exception, context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Write an error with its context and traceback to ``errors.log``.

        Captured collaborator output (``error.output``) is kept in the
        context so failed tool runs can be diagnosed from the log alone.
        """
        context = dict(context or {})
        output = getattr(error, "output", "")
        if output and "output" not in context:
            context["output"] = output

        self.error_logger.error(_record("ERROR", type(error).__name__, {"message": str(error), **context}))
        self.error_logger.error(f"Traceback:\n{traceback.format_exc()}")

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """
        Log an error reaching the CLI and return the line to print.

        Examples:
            >>> logger.log_cli_error(StructuralError("cannot list directory"))
            '❌ StructuralError: cannot list directory'
        """
        self.log_error(error, context or {"source": "cli"})
        return _cli_message(error, show_traceback)


def _cli_message(error: Exception, show_traceback: bool = False) -> str:
    message = f"❌ {type(error).__name__}: {error}"
    if show_traceback:
        return f"{message}\n\n{traceback.format_exc()}"
    return message


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Log a failed CLI operation, print one line to stderr and exit.

    Args:
        ctx: Click context; ``logger`` and ``verbose`` are read from ``ctx.obj``
        error: Exception that occurred
        operation: Name of the failed operation (e.g. 'repo_all')
        additional_context: Extra context such as the offending path
        exit_code: Process exit status
    """
    obj = ctx.obj or {}
    context = {"operation": operation, **(additional_context or {})}
    message = safe_logger(obj.get("logger")).log_cli_error(
        error, context, show_traceback=obj.get("verbose", False)
    )
    click.echo(message, err=True)
    sys.exit(exit_code)


class NullLogger:
    """CheckLogger stand-in that records nothing."""

    def log_check(self, check: str, violations: Optional[int] = None, **context: Any) -> None:
        pass

    def log_work(self, group: str, name: str, status: str, **details: Any) -> None:
        pass

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return _cli_message(error, show_traceback)


_null_logger = NullLogger()


def safe_logger(logger: Optional[CheckLogger]) -> CheckLogger:
    """The given logger, or the shared NullLogger when it is None."""
    return logger if logger is not None else _null_logger  # type: ignore[return-value]
