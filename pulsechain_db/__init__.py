"""
PulseChain Explorer database setup package.

This package provisions the PostgreSQL database used by the PulseChain
explorer: it creates the database when it is missing and applies the bundled
table schema.

The package exposes a ``__version__`` attribute read from the installed
distribution metadata via importlib.metadata.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pulsechain-explorer-db")
except PackageNotFoundError:
    # Package is not installed (running from source without pip install -e .)
    __version__ = "0.0.0.dev"

__all__: list[str] = ["__version__"]
