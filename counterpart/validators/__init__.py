#!/usr/bin/env python3
"""
validators
----------
Naming-convention validators for the checked repository.

- naming.py: filename naming rules and identifier extraction
- repo.py: RepoValidator with the four counterpart checks and reporting
- cli.py: `counterpart repo` command group

Usage:
    counterpart repo all
    counterpart repo functions

    from counterpart.validators.repo import RepoValidator
"""

from counterpart.validators.naming import (
    POLICY_RULE,
    RLS_FUNCTION_RULE,
    Identifier,
    NamingRule,
)
from counterpart.validators.repo import (
    CrossReferenceRule,
    RepoValidator,
    ViolationSet,
    print_violation_report,
)

__all__ = [
    "CrossReferenceRule",
    "Identifier",
    "NamingRule",
    "POLICY_RULE",
    "RLS_FUNCTION_RULE",
    "RepoValidator",
    "ViolationSet",
    "print_violation_report",
]
