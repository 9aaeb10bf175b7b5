"""Helpers shared by the command-line tools."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable, Mapping
from typing import TextIO

from kubectx import env, printer

_DEPRECATED_VARS = frozenset({"KUBECTX_CURRENT_FGCOLOR", "KUBECTX_CURRENT_BGCOLOR"})


class CommandError(Exception):
    """An operation failed; the message is shown to the user."""


def home_dir() -> str:
    """Return HOME, falling back to USERPROFILE, or an empty string."""
    return os.environ.get("HOME", "") or os.environ.get("USERPROFILE", "")


def is_not_found_error(err: BaseException | None) -> bool:
    """Tell whether the error, or any error it was raised from, is a missing file."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, FileNotFoundError):
            return True
        seen.add(id(err))
        err = err.__cause__ or err.__context__
    return False


def _keys(environ: Mapping[str, str] | Iterable[str]) -> Iterable[str]:
    if isinstance(environ, Mapping):
        yield from environ.keys()
        return
    for entry in environ:
        key, sep, _ = entry.partition("=")
        if sep:
            yield key


def print_deprecated_env_warnings(
    out: TextIO, environ: Mapping[str, str] | Iterable[str]
) -> None:
    """Warn about deprecated variables found in ``environ``.

    ``environ`` is a mapping or an iterable of ``KEY=VALUE`` strings.
    """
    for key in _keys(environ):
        if key in _DEPRECATED_VARS:
            printer.warning(out, f"{key} environment variable is now deprecated")


def is_terminal(stream: object) -> bool:
    """Tell whether the stream is attached to a terminal."""
    try:
        return bool(stream.isatty())  # type: ignore[attr-defined]
    except (AttributeError, ValueError, OSError):
        return False


def fzf_installed() -> bool:
    """Tell whether fzf is found on PATH."""
    return shutil.which("fzf") is not None


def is_interactive_mode(stdout: object) -> bool:
    """Tell whether a choice can be made interactively with fzf."""
    return (
        os.environ.get(env.FZF_IGNORE, "") == ""
        and is_terminal(stdout)
        and fzf_installed()
    )