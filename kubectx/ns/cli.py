"""Command line entry point of the namespace switching tool."""

from __future__ import annotations

import os
import subprocess
import sys
import traceback
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, TextIO

from kubectx import env, printer
from kubectx.cmdutil import (
    CommandError,
    is_interactive_mode,
    is_not_found_error,
    print_deprecated_env_warnings,
)
from kubectx.kubeconfig import Kubeconfig, KubeconfigError
from kubectx.loader import DEFAULT_LOADER
from kubectx.ns.operations import CurrentOp, ListOp, SwitchOp, switch_namespace

VERSION = "v0.0.0+unknown"

_PLUGIN_PREFIX = "kubectl-"

_USAGE = """USAGE:
  %PROG%                    : list the namespaces in the current context
  %PROG% <NAME>             : change the active namespace of current context
  %PROG% -                  : switch to the previous namespace in this context
  %PROG% -c, --current      : show the current namespace
  %PROG% -h,--help          : show this message
  %PROG% -V,--version       : show version"""


class Op(Protocol):
    """An operation chosen from the command line."""

    def run(self, stdout: TextIO, stderr: TextIO) -> None: ...


def self_name() -> str:
    """Guess how the user invoked the program."""
    me = os.path.basename(sys.argv[0]) if sys.argv else ""
    if me.startswith(_PLUGIN_PREFIX):
        return "kubectl " + me[len(_PLUGIN_PREFIX):]
    return "kubens"


def print_usage(out: TextIO) -> None:
    """Write the usage text."""
    out.write(_USAGE.replace("%PROG%", self_name()) + "\n")


@dataclass(frozen=True)
class HelpOp:
    """Print the usage text."""

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        print_usage(stdout)


@dataclass(frozen=True)
class VersionOp:
    """Print the version string."""

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        stdout.write(VERSION + "\n")


@dataclass(frozen=True)
class UnsupportedOp:
    """An unusable command line; running it reports the problem."""

    message: str

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        raise CommandError(self.message)


def _stream_for_child(stream: TextIO) -> TextIO | None:
    try:
        stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None
    stream.flush()
    return stream


def _choose_with_fzf(self_cmd: str, stderr: TextIO) -> str:
    """Let the user pick one line of this program's listing with fzf."""
    child_env = {
        **os.environ,
        "FZF_DEFAULT_COMMAND": self_cmd,
        env.FORCE_COLOR: "1",
    }
    try:
        result = subprocess.run(
            ["fzf", "--ansi", "--no-preview"],
            stdout=subprocess.PIPE,
            stderr=_stream_for_child(stderr),
            env=child_env,
            text=True,
            check=False,
        )
    except OSError as err:
        raise CommandError(str(err)) from err
    choice = (result.stdout or "").strip()
    if not choice:
        raise CommandError("you did not choose any of the options")
    return choice


@dataclass(frozen=True)
class InteractiveSwitchOp:
    """Pick a namespace with fzf and make it active."""

    self_cmd: str

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        kc = Kubeconfig(DEFAULT_LOADER)
        try:
            kc.parse()
        except (KubeconfigError, OSError) as err:
            kc.close()
            if is_not_found_error(err):
                printer.warning(stderr, "kubeconfig file not found")
                return
            raise CommandError(f"kubeconfig error: {err}") from err

        with kc:
            choice = _choose_with_fzf(self.self_cmd, stderr)
            try:
                name = switch_namespace(kc, choice)
            except CommandError as err:
                raise CommandError(f"failed to switch namespace: {err}") from err
        printer.success(
            stderr, f'Active namespace is "{printer.SUCCESS_COLOR.sprint(name)}".'
        )


def _program() -> str:
    return sys.argv[0] if sys.argv else "kubens"


def parse_args(argv: Sequence[str] | None) -> Op:
    """Choose the operation for the arguments (without the program name)."""
    args = list(argv or [])
    if not args:
        if is_interactive_mode(sys.stdout):
            return InteractiveSwitchOp(self_cmd=_program())
        return ListOp()

    if len(args) == 1:
        value = args[0]
        if value in ("--help", "-h"):
            return HelpOp()
        if value in ("--version", "-V"):
            return VersionOp()
        if value in ("--current", "-c"):
            return CurrentOp()
        if value.startswith("-") and value != "-":
            return UnsupportedOp(f"unsupported option '{value}'")
        return SwitchOp(target=value)
    return UnsupportedOp("too many arguments")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the tool and return the process exit status."""
    stdout, stderr = sys.stdout, sys.stderr
    print_deprecated_env_warnings(stderr, os.environ)

    op = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        op.run(stdout, stderr)
    except (CommandError, KubeconfigError, OSError) as err:
        printer.error(stderr, str(err))
        if env.DEBUG in os.environ:
            details = "".join(traceback.format_exception(type(err), err, err.__traceback__))
            stderr.write(f"[DEBUG] error: {details}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())