#!/usr/bin/env python3
"""
suite_runner.py
---------------
Execute the database's tSQLt test suite.

The suite runs through SQLAlchemy. When it fails the driver only reports
that something failed, so the suite is run once more through ``sqlcmd`` to
capture the per-test output.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import subprocess
from typing import List, Optional, Union

# --- Third party imports ---
import click
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

# --- Local imports ---
from counterpart.core.config import ConnectionSettings
from counterpart.core.exceptions import DatabaseTestError
from counterpart.core.logging_manager import CheckLogger, safe_logger

RUN_ALL_TESTS = "SET NOCOUNT ON; EXEC tSQLt.RunAll"


class DatabaseTestRunner:
    """
    Runs the database test suite and keeps its error messages.

    Attributes:
        url: SQLAlchemy URL of the test database
        connection: Connection properties for the ``sqlcmd`` fallback
        errors: Error messages collected by ``run_tests``
    """

    def __init__(
        self,
        url: Union[URL, str],
        connection: Optional[ConnectionSettings] = None,
        logger: Optional[CheckLogger] = None,
    ) -> None:
        self.url = url
        self.connection = connection
        self.logger = safe_logger(logger)
        self.errors: List[str] = []

    def _create_engine(self) -> Engine:
        return create_engine(self.url, pool_pre_ping=True)

    def run_tests(self) -> None:
        """
        Run every test in the database.

        Raises:
            DatabaseTestError: If the suite fails or the database cannot be
                reached
        """
        self.logger.log_operation("db_tests_start", {"query": RUN_ALL_TESTS})
        engine: Optional[Engine] = None
        try:
            engine = self._create_engine()
            with engine.connect() as conn:
                conn.exec_driver_sql(RUN_ALL_TESTS)
                conn.commit()
        except ImportError as e:
            # create_engine imports the DBAPI driver (the ``mssql`` extra)
            self.errors.append(f"Database driver unavailable: {e}")
            self.logger.log_error(e, {"operation": "db_tests"})
            raise DatabaseTestError(f"Database driver unavailable: {e}") from e
        except SQLAlchemyError as e:
            self.errors.append(str(e))
            self.logger.log_error(e, {"operation": "db_tests"})
            details = self._capture_details()
            raise DatabaseTestError("Database tests failed", output=details) from e
        finally:
            if engine is not None:
                engine.dispose()

        self.logger.log_operation("db_tests_complete", {"success": True})

    def _capture_details(self) -> str:
        """Re-run the suite through sqlcmd and keep its combined output."""
        if self.connection is None:
            return ""

        cmd = ["sqlcmd", *self.connection.sqlcmd_args(), "-Q", RUN_ALL_TESTS]
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            self.errors.append(f"sqlcmd could not be started: {e}")
            self.logger.log_error(e, {"operation": "db_tests_sqlcmd"})
            return ""

        if result.returncode != 0:
            self.errors.append(f"sqlcmd exited with status {result.returncode}")

        output = (result.stdout or "").strip()
        if output:
            self.errors.append(output)
        return output

    def print_results(self) -> None:
        """Print collected errors, if any."""
        if not self.errors:
            return

        click.echo("db errors:")
        for error in self.errors:
            click.echo(f"* {error}")
        click.echo()
