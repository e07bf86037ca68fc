"""Console cosmetics for the setup tool: rainbow rules, banners and status lines."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

RAINBOW_PALETTE = ("red", "dark_orange", "yellow", "green", "cyan", "blue", "magenta")
BANNER_WIDTH = 59
RULE_CHAR = "═"

ICON_CREATE = "📦"
ICON_OK = "✅"
ICON_FILE = "📄"
ICON_FAIL = "❌"


def rainbow(text: str, palette: tuple[str, ...] = RAINBOW_PALETTE) -> Text:
    """Colour each visible character of ``text`` with the next palette entry."""

    result = Text()
    index = 0
    for char in text:
        if char.isspace():
            result.append(char)
            continue
        result.append(char, style=palette[index % len(palette)])
        index += 1
    return result


def colorize(text: str, style: str = "bold cyan") -> Text:
    return Text(text, style=style)


def build_console(*, no_color: bool = False, stderr: bool = False) -> Console:
    """Return a rich console; ``no_color`` strips all styling."""

    return Console(no_color=no_color, stderr=stderr, highlight=False)


def print_banner(console: Console, title: str, width: int = BANNER_WIDTH) -> None:
    """Print a rainbow rule, the centred title and a closing rule."""

    rule = RULE_CHAR * width
    console.print(rainbow(rule))
    console.print(colorize(title.center(width)))
    console.print(rainbow(rule))
    console.print()


def print_status(console: Console, icon: str, message: str, style: str | None = None) -> None:
    console.print(Text(f"{icon} {message}", style=style or ""))
