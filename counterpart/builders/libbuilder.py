#!/usr/bin/env python3
"""
libbuilder.py
-------------------
Build and refresh the generated class library.

- update(): regenerate the library folders from the database model using
  the generator (``dotnet wyrm.dll generate`` or ``dotnet run``)
- build(): compile the library project with msbuild into a throwaway
  output directory

Updating rewrites the folders the build compiles, so the two must be queued
update-then-build.
"""
from __future__ import annotations

import tempfile
from pathlib import Path
from typing import List, Optional

from counterpart.builders.base import BaseBuilder
from counterpart.core.config import ConnectionSettings, RepoPaths
from counterpart.core.exceptions import BuildError, ConfigurationError, GenerateError
from counterpart.core.logging_manager import CheckLogger
from counterpart.core.paths import GENERATOR_BINARY, GENERATOR_PROJECT


class LibBuilder(BaseBuilder):
    """Generated library collaborator."""

    def __init__(
        self,
        paths: RepoPaths,
        generator_repo: Optional[Path] = None,
        connection: Optional[ConnectionSettings] = None,
        logger: Optional[CheckLogger] = None,
    ):
        """
        Args:
            paths: Resolved repository directories
            generator_repo: Library generator checkout (needed by update)
            connection: Database connection (needed by update)
            logger: Optional logger instance
        """
        super().__init__(logger)
        self.paths = paths
        self.generator_repo = generator_repo
        self.connection = connection

    def build_command(self, output_dir: Path) -> List[str]:
        return [
            "msbuild",
            str(self.paths.lib_project),
            f"/p:OutputPath={output_dir}",
            "/clp:ErrorsOnly",
            "/verbosity:quiet",
        ]

    def build(self) -> None:
        """
        Compile the library project.

        Raises:
            BuildError: If msbuild is missing or reports errors; msbuild
                writes its errors to stdout, which ends up in ``output``
        """
        with tempfile.TemporaryDirectory(prefix="counterpart-lib-") as tmp_dir:
            self._run(self.build_command(Path(tmp_dir)), BuildError, "build")

    def update_command(self) -> List[str]:
        """
        Generator invocation for the configured repository.

        Uses the pre-built generator binary when it exists, otherwise runs
        the generator project through ``dotnet run``.

        Raises:
            ConfigurationError: If the generator repository or connection
                settings are missing
        """
        if self.generator_repo is None:
            raise ConfigurationError("Generator repository path is not set")
        if self.connection is None:
            raise ConfigurationError("Database server, name, uid and pwd must all be set")

        args = ["generate", *self.connection.generator_args(), "-o", str(self.paths.lib)]

        binary = self.generator_repo / GENERATOR_BINARY
        if binary.exists():
            return ["dotnet", str(binary), *args]
        return ["dotnet", "run", "-p", str(self.generator_repo / GENERATOR_PROJECT), "--", *args]

    def update(self) -> None:
        """
        Regenerate the library from the database model.

        Raises:
            ConfigurationError: If the generator cannot be located
            GenerateError: If the generator fails
        """
        self._run(self.update_command(), GenerateError, "update")
