#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for Counterpart.

The checked repository has a fixed layout; these are its relative segments,
joined onto the repository root by ``RepoLayout.resolve``:

    ROOT/
    ├── WigginDB/
    │   ├── Tables/                 # <schema>.<object>.sql
    │   ├── Functions/              # Security.fn_RLS_Read_<schema>_<object>.sql
    │   ├── Security Policies/      # Security.<schema>_<object>.sql
    │   └── Security/Schemas/       # <schema>.sql
    └── Intility.Wiggin/
        └── WigginLib/              # one folder per schema + project files

The generator repository layout is listed below it.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path

# ---- Database project ----
DB_PROJECT_DIR = Path("WigginDB")
TABLES_DIR = DB_PROJECT_DIR / "Tables"
FUNCTIONS_DIR = DB_PROJECT_DIR / "Functions"
POLICIES_DIR = DB_PROJECT_DIR / "Security Policies"
SCHEMAS_DIR = DB_PROJECT_DIR / "Security" / "Schemas"

# ---- Generated library ----
LIB_DIR = Path("Intility.Wiggin") / "WigginLib"
LIB_PROJECT = LIB_DIR / "Intility.Wiggin.csproj"

# Well-known library entries that are not schema folders
LIB_EXCLUSIONS = frozenset({
    "Intility.Wiggin.csproj",
    "Settings.cs",
    "app.config",
    "packages.config",
    "_Data",
    "_Entity",
    "bin",
    "obj",
    "_Repo",
    "Properties",
})

# ---- Generator repository ----
GENERATOR_SRC_DIR = Path("src") / "Wyrm"
GENERATOR_PROJECT = GENERATOR_SRC_DIR / "Wyrm.csproj"
GENERATOR_BINARY = (
    GENERATOR_SRC_DIR / "bin" / "Debug" / "netcoreapp2.0" / "netcoreapp2.0" / "wyrm.dll"
)

# ---- Logs ----
LOG_DIR = Path.home() / ".counterpart" / "logs"
