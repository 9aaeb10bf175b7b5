"""The operations of the context switching tool."""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from functools import total_ordering
from typing import TextIO

from kubectx import printer
from kubectx.cmdutil import CommandError, is_not_found_error
from kubectx.ctx.state import prev_context_file, read_last_context, write_last_context
from kubectx.kubeconfig import Kubeconfig, KubeconfigError
from kubectx.loader import DEFAULT_LOADER

_PLUGIN_PREFIX = "kubectl-"
_CHUNK = re.compile(r"\d+|\D+")


def self_name() -> str:
    """Guess how the user invoked the program."""
    me = os.path.basename(sys.argv[0]) if sys.argv else ""
    if me.startswith(_PLUGIN_PREFIX):
        return "kubectl " + me[len(_PLUGIN_PREFIX):]
    return "kubectx"


@total_ordering
class _Chunk:
    """A run of digits or non-digits; digit runs compare as numbers with each other."""

    __slots__ = ("text", "number")

    def __init__(self, text: str) -> None:
        self.text = text
        self.number = int(text) if text.isdigit() else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Chunk):
            return NotImplemented
        if self.number is not None and other.number is not None:
            return self.number == other.number
        return self.text == other.text

    def __lt__(self, other: _Chunk) -> bool:
        if self.number is not None and other.number is not None:
            return self.number < other.number
        return self.text < other.text

    def __hash__(self) -> int:
        return hash(self.number if self.number is not None else self.text)


def natural_sort_key(value: str) -> tuple[_Chunk, ...]:
    """Key that orders names with embedded numbers naturally (c2 before c10)."""
    return tuple(_Chunk(part) for part in _CHUNK.findall(value))


def parse_rename_syntax(value: str) -> tuple[str, str] | None:
    """Split ``NEW=OLD`` into ``(new, old)``, or return None if it is not that form."""
    parts = value.split("=")
    if len(parts) != 2:
        return None
    new, old = parts
    if not new or not old:
        return None
    return new, old


def _load_kubeconfig() -> Kubeconfig:
    kc = Kubeconfig(DEFAULT_LOADER)
    try:
        kc.parse()
    except (KubeconfigError, OSError) as err:
        kc.close()
        raise CommandError(f"kubeconfig error: {err}") from err
    return kc


def switch_context(name: str) -> str:
    """Make ``name`` the current context and remember the previous one."""
    try:
        state_file = prev_context_file()
    except CommandError as err:
        raise CommandError(f"failed to determine state file: {err}") from err

    with _load_kubeconfig() as kc:
        prev = kc.current_context()
        if not kc.context_exists(name):
            raise CommandError(f'no context exists with the name: "{name}"')
        kc.modify_current_context(name)
        try:
            kc.save()
        except (KubeconfigError, OSError) as err:
            raise CommandError(f"failed to save kubeconfig: {err}") from err

    if prev != name:
        try:
            write_last_context(state_file, prev)
        except (CommandError, OSError) as err:
            raise CommandError(f"failed to save previous context name: {err}") from err
    return name


def swap_context() -> str:
    """Switch back to the previously active context."""
    try:
        state_file = prev_context_file()
    except CommandError as err:
        raise CommandError(f"failed to determine state file: {err}") from err
    try:
        prev = read_last_context(state_file)
    except OSError as err:
        raise CommandError(f"failed to read previous context file: {err}") from err
    if not prev:
        raise CommandError("no previous context found")
    return switch_context(prev)


class _DeletionError(CommandError):
    """Deleting a context failed; carries the name it resolved to."""

    def __init__(self, context_name: str, message: str) -> None:
        super().__init__(message)
        self.context_name = context_name


def delete_context(name: str) -> tuple[str, bool]:
    """Delete a context by name, or the current one for ".".

    Returns the deleted name and whether it was the active context.
    """
    with _load_kubeconfig() as kc:
        was_active = False
        if name == ".":
            current = kc.current_context()
            if not current:
                raise _DeletionError("", "can't use '.' as the no active context is set")
            was_active = True
            name = current

        if not kc.context_exists(name):
            raise _DeletionError(name, "context does not exist")
        try:
            kc.delete_context_entry(name)
        except KubeconfigError as err:
            raise _DeletionError(name, f"failed to modify yaml doc: {err}") from err
        try:
            kc.save()
        except (KubeconfigError, OSError) as err:
            raise _DeletionError(
                name, f"failed to save modified kubeconfig file: {err}"
            ) from err
    return name, was_active


def _print_deleted(stderr: TextIO, name: str, was_active: bool) -> None:
    if was_active:
        printer.warning(
            stderr,
            f'You deleted the current context. Use "{self_name()}" to select a new context.',
        )
    printer.success(stderr, f"Deleted context {printer.SUCCESS_COLOR.sprint(name)}.")


@dataclass(frozen=True)
class CurrentOp:
    """Print the current context."""

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        with _load_kubeconfig() as kc:
            current = kc.current_context()
        if not current:
            raise CommandError("current-context is not set")
        stdout.write(current + "\n")


@dataclass(frozen=True)
class ListOp:
    """List the contexts, highlighting the current one."""

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        try:
            kc = _load_kubeconfig()
        except CommandError as err:
            if is_not_found_error(err):
                printer.warning(stderr, "kubeconfig file not found")
                return
            raise
        with kc:
            names = sorted(kc.context_names(), key=natural_sort_key)
            current = kc.current_context()
        for name in names:
            line = printer.ACTIVE_ITEM_COLOR.sprint(name) if name == current else name
            stdout.write(line + "\n")


@dataclass(frozen=True)
class SwitchOp:
    """Switch to a context by name, or to the previous one for "-"."""

    target: str

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        try:
            new_ctx = swap_context() if self.target == "-" else switch_context(self.target)
        except CommandError as err:
            raise CommandError(f"failed to switch context: {err}") from err
        printer.success(
            stderr, f'Switched to context "{printer.SUCCESS_COLOR.sprint(new_ctx)}".'
        )


@dataclass(frozen=True)
class RenameOp:
    """Rename context ``old`` (or the current one for ".") to ``new``."""

    new: str
    old: str

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        with _load_kubeconfig() as kc:
            current = kc.current_context()
            old = current if self.old == "." else self.old

            if not kc.context_exists(old):
                raise CommandError(f'context "{old}" not found, can\'t rename it')

            if kc.context_exists(self.new):
                printer.warning(stderr, f'context "{self.new}" exists, overwriting it.')
                try:
                    kc.delete_context_entry(self.new)
                except KubeconfigError as err:
                    raise CommandError(
                        f"failed to delete new context to overwrite it: {err}"
                    ) from err

            try:
                kc.modify_context_name(old, self.new)
            except KubeconfigError as err:
                raise CommandError(f"failed to change context name: {err}") from err
            if old == current:
                try:
                    kc.modify_current_context(self.new)
                except KubeconfigError as err:
                    raise CommandError(
                        f"failed to set current-context to new name: {err}"
                    ) from err
            try:
                kc.save()
            except (KubeconfigError, OSError) as err:
                raise CommandError(f"failed to save modified kubeconfig: {err}") from err

        printer.success(
            stderr,
            f"Context {printer.SUCCESS_COLOR.sprint(old)} renamed to "
            f"{printer.SUCCESS_COLOR.sprint(self.new)}.",
        )


@dataclass(frozen=True)
class DeleteOp:
    """Delete contexts by name ("." meaning the current context)."""

    contexts: list[str] = field(default_factory=list)

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        for ctx in self.contexts:
            try:
                name, was_active = delete_context(ctx)
            except _DeletionError as err:
                raise CommandError(
                    f'error deleting context "{err.context_name}": {err}'
                ) from err
            _print_deleted(stderr, name, was_active)


@dataclass(frozen=True)
class UnsetOp:
    """Remove the current-context preference."""

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        with _load_kubeconfig() as kc:
            try:
                kc.unset_current_context()
            except KubeconfigError as err:
                raise CommandError(
                    f"error while modifying current-context: {err}"
                ) from err
            try:
                kc.save()
            except (KubeconfigError, OSError) as err:
                raise CommandError(
                    f"failed to save kubeconfig file after modification: {err}"
                ) from err
        printer.success(stderr, "Active context unset for kubectl.")