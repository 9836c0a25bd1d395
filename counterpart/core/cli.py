#!/usr/bin/env python3
"""
cli.py
------
Shared CLI utilities for Counterpart commands.

Functions:
    setup_logger: Initialize CheckLogger for CLI operations
    get_settings: Load run settings once from the click context

Classes:
    RunStats: Counters and timing for a full check run

Usage:
    from counterpart.core.cli import setup_logger, RunStats

    logger = setup_logger(log_dir, "repo")
    stats = RunStats()
    stats.violations += 3
    click.echo(stats.summary())
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

# --- Third party imports ---
import click

# --- Local imports ---
from counterpart.core.config import Settings, load_settings
from counterpart.core.exceptions import ConfigurationError
from counterpart.core.logging_manager import CheckLogger, handle_cli_error


def setup_logger(log_dir: Path, component_name: str) -> CheckLogger:
    """
    Setup logging for CLI operations.

    Creates the operations log directory if it doesn't exist and initializes
    a CheckLogger instance for the specified component.

    Args:
        log_dir: Base log directory (typically from paths.LOG_DIR)
        component_name: Component identifier for logging (e.g., 'repo', 'check')

    Returns:
        Configured CheckLogger instance
    """
    operations_log_dir = Path(log_dir) / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return CheckLogger(operations_log_dir, component_name=component_name)


@dataclass
class RunStats:
    """
    Statistics for a check run.

    Attributes:
        work_items: Number of work items executed
        violations: Number of repository violations found
        failures: Number of work items that failed
        start_time: Run start timestamp
    """
    work_items: int = 0
    violations: int = 0
    failures: int = 0
    start_time: datetime = field(default_factory=datetime.now)
    _duration_cached: Optional[float] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        for name in ("work_items", "violations", "failures"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

    def duration(self) -> float:
        """Elapsed seconds since start_time (cached after first call)."""
        if self._duration_cached is None:
            self._duration_cached = (datetime.now() - self.start_time).total_seconds()
        return self._duration_cached

    @property
    def is_clean(self) -> bool:
        return self.violations == 0 and self.failures == 0

    def summary(self) -> str:
        return (
            f"{self.work_items} work items, "
            f"{self.violations} violations, "
            f"{self.failures} failures, "
            f"{self.duration():.2f}s"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "work_items": self.work_items,
            "violations": self.violations,
            "failures": self.failures,
            "duration": self.duration(),
        }


# ═══════════════════════════════════════════════════════════════════════════
# SETTINGS
# ═══════════════════════════════════════════════════════════════════════════

def get_settings(ctx: click.Context) -> Settings:
    """
    Settings for this process, loaded on first use.

    The top-level group stores raw option values in ``ctx.obj["options"]``;
    loading them here keeps ``--help`` usable without a repository. The
    loaded settings and a logger are cached on the root context object.

    Args:
        ctx: Any click context below the top-level group

    Returns:
        Settings instance
    """
    obj = ctx.find_root().ensure_object(dict)
    if "settings" in obj:
        return obj["settings"]

    options: Dict[str, Any] = dict(obj.get("options", {}))
    config_file = options.pop("config_file", None)
    try:
        settings = load_settings(
            Path(config_file) if config_file else None, **options
        )
    except ConfigurationError as e:
        handle_cli_error(ctx, e, "load_settings")

    obj["settings"] = settings
    obj["logger"] = setup_logger(settings.log_dir, "counterpart")
    obj["logger"].log_operation(
        "settings_loaded",
        {"repo": str(settings.repo_root), "log_dir": str(settings.log_dir)},
    )
    return settings
