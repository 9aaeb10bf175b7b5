"""The operations of the namespace switching tool."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TextIO

from kubectx import printer
from kubectx.cmdutil import CommandError
from kubectx.kubeconfig import Kubeconfig, KubeconfigError
from kubectx.loader import DEFAULT_LOADER
from kubectx.ns.namespaces import namespace_exists, query_namespaces
from kubectx.ns.statefile import NSFile


def _load_kubeconfig() -> Kubeconfig:
    kc = Kubeconfig(DEFAULT_LOADER)
    try:
        kc.parse()
    except (KubeconfigError, OSError) as err:
        kc.close()
        raise CommandError(f"kubeconfig error: {err}") from err
    return kc


def _current_context(kc: Kubeconfig) -> str:
    ctx = kc.current_context()
    if not ctx:
        raise CommandError("current-context is not set")
    return ctx


def switch_namespace(kc: Kubeconfig, namespace: str) -> str:
    """Make ``namespace`` (or the previous one for "-") active in the current context."""
    ctx = _current_context(kc)
    try:
        current_ns = kc.namespace_of_context(ctx)
    except KubeconfigError as err:
        raise CommandError(f"failed to get current namespace: {err}") from err

    state = NSFile(ctx)
    try:
        prev = state.load()
    except OSError as err:
        raise CommandError(f"failed to load previous namespace from file: {err}") from err

    if namespace == "-":
        if not prev:
            raise CommandError(f"No previous namespace found for current context ({ctx})")
        namespace = prev

    try:
        exists = namespace_exists(kc, namespace)
    except CommandError as err:
        raise CommandError(
            f"failed to query if namespace exists (is cluster accessible?): {err}"
        ) from err
    if not exists:
        raise CommandError(f'no namespace exists with name "{namespace}"')

    try:
        kc.set_namespace(ctx, namespace)
    except KubeconfigError as err:
        raise CommandError(f'failed to change to namespace "{namespace}": {err}') from err
    try:
        kc.save()
    except (KubeconfigError, OSError) as err:
        raise CommandError(f"failed to save kubeconfig file: {err}") from err

    if current_ns != namespace:
        try:
            state.save(current_ns)
        except OSError as err:
            raise CommandError(
                f"failed to save the previous namespace to file: {err}"
            ) from err
    return namespace


@dataclass(frozen=True)
class CurrentOp:
    """Print the namespace of the current context."""

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        with _load_kubeconfig() as kc:
            ctx = _current_context(kc)
            try:
                namespace = kc.namespace_of_context(ctx)
            except KubeconfigError as err:
                raise CommandError(f'failed to read namespace of "{ctx}": {err}') from err
        stdout.write(namespace + "\n")


@dataclass(frozen=True)
class ListOp:
    """List the namespaces of the cluster, highlighting the active one."""

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        with _load_kubeconfig() as kc:
            ctx = _current_context(kc)
            try:
                current_ns = kc.namespace_of_context(ctx)
            except KubeconfigError as err:
                raise CommandError(f"cannot read current namespace: {err}") from err
            try:
                namespaces = query_namespaces(kc)
            except CommandError as err:
                raise CommandError(
                    f"could not list namespaces (is the cluster accessible?): {err}"
                ) from err
        for name in namespaces:
            line = printer.ACTIVE_ITEM_COLOR.sprint(name) if name == current_ns else name
            stdout.write(line + "\n")


@dataclass(frozen=True)
class SwitchOp:
    """Switch to a namespace by name, or to the previous one for "-"."""

    target: str

    def run(self, stdout: TextIO, stderr: TextIO) -> None:
        with _load_kubeconfig() as kc:
            namespace = switch_namespace(kc, self.target)
        printer.success(
            stderr, f'Active namespace is "{printer.SUCCESS_COLOR.sprint(namespace)}"'
        )