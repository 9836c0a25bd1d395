"""
Pipeline package for Counterpart.

Schedules checks and collaborators as concurrent work items.
"""

from counterpart.pipeline.runner import Runner, Work, WorkResult, WorkStatus, print_run_report

__all__ = [
    "Runner",
    "Work",
    "WorkResult",
    "WorkStatus",
    "print_run_report",
]
