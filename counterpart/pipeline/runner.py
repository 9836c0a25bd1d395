#!/usr/bin/env python3
"""
runner.py
---------
Concurrent work orchestration for check runs.

Work items are plain callables that return normally on success and raise on
failure. Independent items run concurrently on a thread pool; a queue runs
its items in order inside a single task and stops at the first failure,
recording the remaining items as skipped. ``execute`` returns only after
every task has finished.

Usage:
    runner = Runner()
    runner.add_work(validator.check_empty_files, "repo", "empty files")
    runner.add_queue([
        Work(lib.update, "lib", "update"),
        Work(lib.build, "lib", "build"),
    ])
    results = runner.execute()
"""
from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence

import click

from counterpart.core.exceptions import CollaboratorError
from counterpart.core.logging_manager import CheckLogger, safe_logger


class WorkStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Work:
    """A named unit of work."""

    fn: Callable[[], Any]
    group: str
    name: str


@dataclass(frozen=True)
class WorkResult:
    """Outcome of one work item."""

    group: str
    name: str
    status: WorkStatus
    error: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == WorkStatus.OK


def _describe(exc: Exception) -> str:
    """Error text including any captured tool output."""
    message = str(exc) or type(exc).__name__
    if isinstance(exc, CollaboratorError) and exc.output and exc.output not in message:
        return f"{message}\n{exc.output}"
    return message


class Runner:
    """Schedules work items and queues on a thread pool."""

    def __init__(self, jobs: Optional[int] = None, logger: Optional[CheckLogger] = None) -> None:
        """
        Args:
            jobs: Maximum concurrent tasks (default: one per registered unit)
            logger: Optional logger instance
        """
        self.jobs = jobs
        self.logger = safe_logger(logger)
        self._units: List[List[Work]] = []

    def add_work(self, fn: Callable[[], Any], group: str, name: str) -> None:
        """Register an independent work item."""
        self._units.append([Work(fn, group, name)])

    def add_queue(self, queue: Sequence[Work]) -> None:
        """Register work items that must run in the given order."""
        if queue:
            self._units.append(list(queue))

    def __len__(self) -> int:
        return sum(len(unit) for unit in self._units)

    def _run_one(self, work: Work) -> WorkResult:
        self.logger.log_work(work.group, work.name, "start")
        start = time.perf_counter()
        try:
            work.fn()
        except Exception as exc:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            self.logger.log_error(exc, {"group": work.group, "name": work.name})
            self.logger.log_work(work.group, work.name, WorkStatus.FAILED.value, duration_ms=elapsed_ms)
            return WorkResult(work.group, work.name, WorkStatus.FAILED, _describe(exc), elapsed_ms)

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        self.logger.log_work(work.group, work.name, WorkStatus.OK.value, duration_ms=elapsed_ms)
        return WorkResult(work.group, work.name, WorkStatus.OK, duration_ms=elapsed_ms)

    def _run_queue(self, queue: List[Work]) -> List[WorkResult]:
        results: List[WorkResult] = []
        failed: Optional[WorkResult] = None
        for work in queue:
            if failed is not None:
                self.logger.log_work(work.group, work.name, WorkStatus.SKIPPED.value, after=failed.name)
                results.append(WorkResult(
                    work.group,
                    work.name,
                    WorkStatus.SKIPPED,
                    f"skipped after '{failed.name}' failed",
                ))
                continue

            result = self._run_one(work)
            results.append(result)
            if not result.ok:
                failed = result
        return results

    def execute(self) -> List[WorkResult]:
        """
        Run every registered unit and wait for all of them.

        Returns:
            Results in registration order
        """
        if not self._units:
            return []

        workers = self.jobs or len(self._units)
        self.logger.log_operation("run_start", {"units": len(self._units), "workers": workers})

        with ThreadPoolExecutor(max_workers=workers) as ex:
            produced = list(ex.map(self._run_queue, self._units))

        results = [result for unit in produced for result in unit]
        self.logger.log_operation(
            "run_complete",
            {"work_items": len(results), "failed": sum(1 for r in results if r.status == WorkStatus.FAILED)},
        )
        return results


def print_run_report(results: Sequence[WorkResult]) -> None:
    """Print failed and skipped work items grouped by their group."""
    problems = [r for r in results if not r.ok]
    if not problems:
        return

    groups: List[str] = []
    for result in problems:
        if result.group not in groups:
            groups.append(result.group)

    for group in groups:
        click.echo(f"{group} errors:")
        for result in problems:
            if result.group == group:
                click.echo(f"* {result.name} ({result.status.value}): {result.error}")
        click.echo()
