"""The file that remembers the previously active context."""

from __future__ import annotations

import os
from pathlib import Path

from kubectx.cmdutil import CommandError, home_dir


def prev_context_file() -> str:
    """Return the path of the file holding the previous context name."""
    home = home_dir()
    if not home:
        raise CommandError("HOME or USERPROFILE environment variable not set")
    return os.path.join(home, ".kube", "kubectx")


def read_last_context(path: str | os.PathLike[str]) -> str:
    """Return the saved previous context, or an empty string if there is none."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


def write_last_context(path: str | os.PathLike[str], value: str) -> None:
    """Save the value to the state file, creating missing parent directories."""
    target = Path(path)
    try:
        target.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as err:
        raise CommandError(f"failed to create parent directories: {err}") from err
    target.write_text(value, encoding="utf-8")