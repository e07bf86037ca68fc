"""CLI interface for the database setup tool.

All Click commands live in this package. Use ``python -m
pulsechain_db.interfaces.cli`` or the ``pulsechain-db`` console script.
"""

from .__main__ import cli
from .provision import check, setup

__all__ = [
    "check",
    "cli",
    "setup",
]
