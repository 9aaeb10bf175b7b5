"""Locating and opening the kubeconfig file on disk."""

from __future__ import annotations

import os

from kubectx.cmdutil import home_dir
from kubectx.kubeconfig import KubeconfigError, Loader


class KubeconfigFile:
    """A kubeconfig file opened for reading and rewriting."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._file = open(path, "r+", encoding="utf-8", newline="")

    def read(self) -> str:
        """Return the rest of the file contents."""
        return self._file.read()

    def write(self, data: str | bytes) -> None:
        """Write text at the current position."""
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        self._file.write(data)

    def reset(self) -> None:
        """Empty the file and move to its start."""
        try:
            self._file.truncate(0)
        except OSError as err:
            raise KubeconfigError(f"failed to truncate file: {err}") from err
        try:
            self._file.seek(0)
        except OSError as err:
            raise KubeconfigError(f"failed to seek in file: {err}") from err

    def close(self) -> None:
        """Flush and close the file."""
        self._file.close()


def kubeconfig_path() -> str:
    """Return the kubeconfig path from KUBECONFIG or the home directory."""
    value = os.environ.get("KUBECONFIG", "")
    if value:
        if len(value.split(os.pathsep)) > 1:
            raise KubeconfigError("multiple files in KUBECONFIG are currently not supported")
        return value

    home = home_dir()
    if not home:
        raise KubeconfigError("HOME or USERPROFILE environment variable not set")
    return os.path.join(home, ".kube", "config")


class StandardKubeconfigLoader(Loader):
    """Opens the kubeconfig file named by the environment."""

    def load(self) -> list[KubeconfigFile]:
        try:
            path = kubeconfig_path()
        except KubeconfigError as err:
            raise KubeconfigError(f"cannot determine kubeconfig path: {err}") from err
        try:
            return [KubeconfigFile(path)]
        except FileNotFoundError as err:
            raise KubeconfigError(f"kubeconfig file not found: {err}") from err
        except OSError as err:
            raise KubeconfigError(f"failed to open file: {err}") from err


DEFAULT_LOADER = StandardKubeconfigLoader()