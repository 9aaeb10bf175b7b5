"""Colored status messages written to terminal streams."""

from __future__ import annotations

import os
import sys
from typing import TextIO

from kubectx import env

FG_RED = 31
FG_GREEN = 32
FG_YELLOW = 33
BOLD = 1

_RESET = "\x1b[0m"


def _stdout_is_terminal() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def _colors_disabled_by_default() -> bool:
    return os.environ.get("TERM", "") == "dumb" or not _stdout_is_terminal()


class Color:
    """A set of ANSI display attributes that can wrap text.

    ``forced`` is True or False when coloring was explicitly turned on or off;
    when it is None the decision depends on the terminal.
    """

    def __init__(self, *attributes: int, forced: bool | None = None) -> None:
        self.attributes = tuple(attributes)
        self.forced = forced

    @property
    def enabled(self) -> bool:
        if self.forced is not None:
            return self.forced
        return not _colors_disabled_by_default()

    def enable(self) -> None:
        """Always emit color codes, whatever the terminal."""
        self.forced = True

    def disable(self) -> None:
        """Never emit color codes."""
        self.forced = False

    def sprint(self, *args: object) -> str:
        """Join the arguments into one string, wrapped in color codes if enabled."""
        text = "".join(str(arg) for arg in args)
        if not self.enabled:
            return text
        codes = ";".join(str(attr) for attr in self.attributes)
        return f"\x1b[{codes}m{text}{_RESET}"


def use_colors() -> bool | None:
    """Return True if colors are forced on, False if forced off, None otherwise."""
    if os.environ.get(env.FORCE_COLOR, ""):
        return True
    if os.environ.get(env.NO_COLOR, ""):
        return False
    return None


def enable_or_disable_color(color: Color) -> None:
    """Force the color on or off according to the environment, if it says so."""
    setting = use_colors()
    if setting is True:
        color.enable()
    elif setting is False:
        color.disable()


ACTIVE_ITEM_COLOR = Color(FG_GREEN, BOLD)
ERROR_COLOR = Color(FG_RED, BOLD)
WARNING_COLOR = Color(FG_YELLOW, BOLD)
SUCCESS_COLOR = Color(FG_GREEN)

for _color in (ACTIVE_ITEM_COLOR, ERROR_COLOR, WARNING_COLOR, SUCCESS_COLOR):
    enable_or_disable_color(_color)


def error(out: TextIO, message: str) -> None:
    """Write an error line."""
    out.write(ERROR_COLOR.sprint("error: ") + message + "\n")


def warning(out: TextIO, message: str) -> None:
    """Write a warning line."""
    out.write(WARNING_COLOR.sprint("warning: ") + message + "\n")


def success(out: TextIO, message: str) -> None:
    """Write a success line prefixed with a check mark."""
    out.write(SUCCESS_COLOR.sprint("✔ ") + message + "\n")