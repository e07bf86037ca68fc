#!/usr/bin/env python3
"""Create the explorer database if needed and apply ``create.tables.sql``.

Usage:
    python scripts/setup_db.py [--db-name NAME] [--env-file PATH] [--schema PATH]

Same as ``pulsechain-db setup``; exits 0 on success and 1 on any failure.
"""
from __future__ import annotations

import sys
from pathlib import Path

# Ensure package is importable when run as script
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from pulsechain_db.interfaces.cli.provision import setup  # noqa: E402


if __name__ == "__main__":
    setup(prog_name="setup_db.py")
