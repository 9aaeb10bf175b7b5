"""Per-context files that remember the previously active namespace."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from kubectx.cmdutil import home_dir

_FORCE_OS_ENV = "_FORCE_GOOS"


def default_dir() -> str:
    """Return the directory that holds the namespace state files."""
    return os.path.join(home_dir(), ".kube", "kubens")


def is_windows() -> bool:
    """Tell whether the process runs on Windows (or is told to act as if it does)."""
    if os.environ.get(_FORCE_OS_ENV, "") == "windows":
        return True
    return sys.platform == "win32"


@dataclass(frozen=True)
class NSFile:
    """The state file of one context."""

    ctx: str
    directory: str = field(default_factory=default_dir)

    def path(self) -> str:
        """Return the file path; ':' is not allowed in Windows file names."""
        name = self.ctx
        if is_windows():
            name = name.replace(":", "__")
        return os.path.join(self.directory, name)

    def load(self) -> str:
        """Return the saved previous namespace, or an empty string if none."""
        try:
            data = Path(self.path()).read_bytes()
        except FileNotFoundError:
            return ""
        return data.decode("utf-8").strip()

    def save(self, value: str) -> None:
        """Store the previous namespace, creating missing directories."""
        target = Path(self.path())
        target.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
        target.write_text(value, encoding="utf-8")