#!/usr/bin/env python3
"""
naming.py
---------
Filename naming rules for database source files.

A naming rule is a pattern with named groups ``schema`` and ``object``.
Matching a filename against a rule yields the identifier of the table the
file belongs to:

    Security.sales_orders.sql              -> (sales, orders)   policy rule
    Security.fn_RLS_Read_sales_orders.sql  -> (sales, orders)   function rule

The table itself lives in ``<schema>.<object>.sql``.

Patterns are searched, not anchored, so a rule also matches filenames that
merely contain the convention. Both groups are greedy; with more than one
underscore the schema takes everything up to the last one.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern

TABLE_FILE_SEPARATOR = "."
SQL_SUFFIX = ".sql"


@dataclass(frozen=True)
class Identifier:
    """Schema/object pair extracted from a filename."""

    schema: str
    object: str

    @property
    def table_filename(self) -> str:
        """Filename of the table this identifier points at."""
        return f"{self.schema}{TABLE_FILE_SEPARATOR}{self.object}{SQL_SUFFIX}"


@dataclass(frozen=True)
class NamingRule:
    """
    A filename convention that implies a table counterpart.

    Attributes:
        name: Short rule name used in logs
        pattern: Compiled pattern with ``schema`` and ``object`` groups
    """

    name: str
    pattern: Pattern[str]

    def extract(self, filename: str) -> Optional[Identifier]:
        """
        Extract the identifier from a filename.

        Groups that did not take part in the match give empty strings.

        Args:
            filename: Bare filename (no directory)

        Returns:
            Identifier, or None if the filename does not follow the rule
        """
        match = self.pattern.search(filename)
        if match is None:
            return None

        groups = match.groupdict(default="")
        return Identifier(
            schema=groups.get("schema", ""),
            object=groups.get("object", ""),
        )


POLICY_RULE = NamingRule(
    name="policy",
    pattern=re.compile(r"Security\.(?P<schema>\w+)_(?P<object>\w+)\.sql", re.ASCII),
)

RLS_FUNCTION_RULE = NamingRule(
    name="rls_function",
    pattern=re.compile(r"Security\.fn_RLS_Read_(?P<schema>\w+)_(?P<object>\w+)\.sql", re.ASCII),
)
