"""Terminal colour and formatting helpers."""

from .colors import (ICON_CREATE, ICON_FAIL, ICON_FILE, ICON_OK, build_console,
                     colorize, print_banner, print_status, rainbow)

__all__ = [
    "ICON_CREATE",
    "ICON_FAIL",
    "ICON_FILE",
    "ICON_OK",
    "build_console",
    "colorize",
    "print_banner",
    "print_status",
    "rainbow",
]
