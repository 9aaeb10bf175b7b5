"""Command line entry point of the context switching tool."""

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
from kubectx.ctx.operations import (
    CurrentOp,
    DeleteOp,
    ListOp,
    RenameOp,
    SwitchOp,
    UnsetOp,
    delete_context,
    parse_rename_syntax,
    self_name,
    switch_context,
)
from kubectx.kubeconfig import Kubeconfig, KubeconfigError
from kubectx.loader import DEFAULT_LOADER

VERSION = "v0.0.0+unknown"

_USAGE = """USAGE:
  %PROG%                       : list the contexts
  %PROG% <NAME>                : switch to context <NAME>
  %PROG% -                     : switch to the previous context
  %PROG% -c, --current         : show the current context name
  %PROG% <NEW_NAME>=<NAME>     : rename context <NAME> to <NEW_NAME>
  %PROG% <NEW_NAME>=.          : rename current-context to <NEW_NAME>
  %PROG% -u, --unset           : unset the current context
  %PROG% -d <NAME> [<NAME...>] : delete context <NAME> ('.' for current-context)
  %SPAC%                         (this command won't delete the user/cluster entry
  %SPAC%                          referenced by the context entry)
  %PROG% -h,--help             : show this message
  %PROG% -V,--version          : show version"""


class Op(Protocol):
    """An operation chosen from the command line."""

    def run(self, stdout: TextIO, stderr: TextIO) -> None: ...


def print_usage(out: TextIO) -> None:
    """Write the usage text."""
    name = self_name()
    text = _USAGE.replace("%PROG%", name).replace("%SPAC%", " " * len(name))
    out.write(text + "\n")


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


def _kubeconfig_loads(stderr: TextIO) -> Kubeconfig | None:
    """Parse the kubeconfig; warn and return None if the file is missing."""
    kc = Kubeconfig(DEFAULT_LOADER)
    try:
        kc.parse()
    except (KubeconfigError, OSError) as err:
        kc.close()
        if is_not_found_error(err):
            printer.warning(stderr, "kubeconfig file not found")
            return None
        raise CommandError(f"kubeconfig error: {err}") from err
    return kc


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
    """Pick a context with fzf and switch to it."""

    self_cmd: str

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        kc = _kubeconfig_loads(stderr)
        if kc is None:
            return
        kc.close()

        choice = _choose_with_fzf(self.self_cmd, stderr)
        try:
            name = switch_context(choice)
        except CommandError as err:
            raise CommandError(f"failed to switch context: {err}") from err
        printer.success(
            stderr, f'Switched to context "{printer.SUCCESS_COLOR.sprint(name)}".'
        )


@dataclass(frozen=True)
class InteractiveDeleteOp:
    """Pick a context with fzf and delete it."""

    self_cmd: str

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        kc = _kubeconfig_loads(stderr)
        if kc is None:
            return
        kc.close()
        if not kc.context_names():
            raise CommandError("no contexts found in config")

        choice = _choose_with_fzf(self.self_cmd, stderr)
        try:
            name, was_active = delete_context(choice)
        except CommandError as err:
            raise CommandError(f"failed to delete context: {err}") from err

        if was_active:
            printer.warning(
                stderr,
                f'You deleted the current context. Use "{self_name()}" '
                "to select a new context.",
            )
        printer.success(stderr, f"Deleted context {printer.SUCCESS_COLOR.sprint(name)}.")


def _program() -> str:
    return sys.argv[0] if sys.argv else "kubectx"


def parse_args(argv: Sequence[str] | None) -> Op:
    """Choose the operation for the arguments (without the program name)."""
    args = list(argv or [])
    if not args:
        if is_interactive_mode(sys.stdout):
            return InteractiveSwitchOp(self_cmd=_program())
        return ListOp()

    if args[0] == "-d":
        if len(args) == 1:
            if is_interactive_mode(sys.stdout):
                return InteractiveDeleteOp(self_cmd=_program())
            return UnsupportedOp("'-d' needs arguments")
        return DeleteOp(contexts=args[1:])

    if len(args) == 1:
        value = args[0]
        if value in ("--help", "-h"):
            return HelpOp()
        if value in ("--version", "-V"):
            return VersionOp()
        if value in ("--current", "-c"):
            return CurrentOp()
        if value in ("--unset", "-u"):
            return UnsetOp()

        renamed = parse_rename_syntax(value)
        if renamed is not None:
            new, old = renamed
            return RenameOp(new=new, old=old)

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