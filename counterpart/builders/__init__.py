"""
Builders package for Counterpart.

Wraps the external .NET tooling around the generated class library:
- LibBuilder.update: regenerate library folders from the database model
- LibBuilder.build: compile the library project with msbuild
"""

from counterpart.builders.base import BaseBuilder
from counterpart.builders.libbuilder import LibBuilder

__all__ = [
    "BaseBuilder",
    "LibBuilder",
]
