#!/usr/bin/env python3
"""
base.py
-------------------
Base class for external tool collaborators.

Provides:
- BaseBuilder: logger integration and subprocess execution shared by
  builders that shell out to .NET tooling
"""
from __future__ import annotations

import subprocess
from abc import ABC
from pathlib import Path
from typing import List, Optional, Type

from counterpart.core.exceptions import CollaboratorError
from counterpart.core.logging_manager import CheckLogger, safe_logger


class BaseBuilder(ABC):
    """
    Abstract base class for builder implementations.

    Attributes:
        logger: Logger for operation tracking (null logger when not given)
    """

    def __init__(self, logger: Optional[CheckLogger] = None):
        self.logger = safe_logger(logger)

    def _run(
        self,
        cmd: List[str],
        error_cls: Type[CollaboratorError],
        operation: str,
        cwd: Optional[Path] = None,
    ) -> subprocess.CompletedProcess:
        """
        Run an external command and capture its output.

        Args:
            cmd: Command and arguments
            error_cls: Exception raised on failure
            operation: Operation name for logs and messages
            cwd: Optional working directory

        Returns:
            Completed process on exit status 0

        Raises:
            error_cls: If the executable is missing or exits non-zero
        """
        self.logger.log_operation(f"{operation}_start", {"cmd": cmd[0], "cwd": str(cwd or "")})
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=cwd,
            )
        except OSError as e:
            error = error_cls(f"{operation} failed to start '{cmd[0]}': {e}")
            self.logger.log_error(error, {"operation": operation})
            raise error from e

        if result.returncode != 0:
            output = (result.stdout or "") + (result.stderr or "")
            error = error_cls(
                f"{operation} failed with exit status {result.returncode}",
                output=output.strip(),
            )
            self.logger.log_error(error, {"operation": operation, "output": output.strip()})
            raise error

        self.logger.log_operation(f"{operation}_complete", {"success": True})
        return result
