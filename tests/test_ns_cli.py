import io
import sys

import pytest

from kubectx.cmdutil import CommandError
from kubectx.ns.cli import (
    HelpOp,
    InteractiveSwitchOp,
    UnsupportedOp,
    VersionOp,
    main,
    parse_args,
    print_usage,
    self_name,
)
from kubectx.ns.operations import CurrentOp, ListOp, SwitchOp

KUBECONFIG_TEXT = """apiVersion: v1
kind: Config
current-context: c1
contexts:
- name: c1
  context:
    namespace: ns1
- name: c2
"""


@pytest.fixture
def no_fzf(monkeypatch):
    monkeypatch.setenv("KUBECTX_IGNORE_FZF", "1")


@pytest.fixture
def kubeconfig_file(tmp_path, monkeypatch):
    path = tmp_path / "config"
    path.write_text(KUBECONFIG_TEXT, encoding="utf-8")
    monkeypatch.setenv("KUBECONFIG", str(path))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("KUBECTX_CURRENT_FGCOLOR", raising=False)
    monkeypatch.delenv("KUBECTX_CURRENT_BGCOLOR", raising=False)
    return path


@pytest.mark.parametrize(
    "args, expected",
    [
        (None, ListOp()),
        ([], ListOp()),
        (["-h"], HelpOp()),
        (["--help"], HelpOp()),
        (["-c"], CurrentOp()),
        (["--current"], CurrentOp()),
        (["foo"], SwitchOp(target="foo")),
        (["-"], SwitchOp(target="-")),
        (["-x"], UnsupportedOp("unsupported option '-x'")),
        (["a", "b", "c"], UnsupportedOp("too many arguments")),
        (["-V"], VersionOp()),
        (["--version"], VersionOp()),
    ],
)
def test_parse_args(no_fzf, args, expected):
    assert parse_args(args) == expected


def test_print_help():
    out = io.StringIO()
    HelpOp().run(out, out)
    text = out.getvalue()
    assert "USAGE:" in text
    assert text.endswith("\n")


def test_print_usage_uses_program_name(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["/usr/bin/kubens"])
    out = io.StringIO()
    print_usage(out)
    assert "  kubens -c, --current" in out.getvalue()
    assert "%PROG%" not in out.getvalue()


def test_self_name_default(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["/usr/local/bin/kubens"])
    assert self_name() == "kubens"


def test_self_name_plugin(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["/usr/local/bin/kubectl-ns"])
    assert self_name() == "kubectl ns"


def test_version_op():
    out = io.StringIO()
    VersionOp().run(out, io.StringIO())
    assert out.getvalue() == "v0.0.0+unknown\n"


def test_unsupported_op_raises():
    with pytest.raises(CommandError, match="too many arguments"):
        UnsupportedOp("too many arguments").run(io.StringIO(), io.StringIO())


def test_interactive_switch_missing_kubeconfig(tmp_path, monkeypatch):
    monkeypatch.setenv("KUBECONFIG", str(tmp_path / "missing"))
    stderr = io.StringIO()
    InteractiveSwitchOp(self_cmd="kubens").run(io.StringIO(), stderr)
    assert "kubeconfig file not found" in stderr.getvalue()


def test_main_help(no_fzf, kubeconfig_file, capsys):
    assert main(["-h"]) == 0
    assert "USAGE:" in capsys.readouterr().out


def test_main_unsupported_option(no_fzf, kubeconfig_file, capsys):
    assert main(["-x"]) == 1
    assert "unsupported option '-x'" in capsys.readouterr().err


def test_main_current(no_fzf, kubeconfig_file, capsys):
    assert main(["-c"]) == 0
    assert capsys.readouterr().out == "ns1\n"


def test_main_switch_and_back(no_fzf, kubeconfig_file, monkeypatch, capsys):
    monkeypatch.setenv("_MOCK_NAMESPACES", "1")
    assert main(["ns2"]) == 0
    assert "namespace: ns2" in kubeconfig_file.read_text(encoding="utf-8")
    assert main(["-"]) == 0
    assert "namespace: ns1" in kubeconfig_file.read_text(encoding="utf-8")
    assert "Active namespace is" in capsys.readouterr().err


def test_main_switch_unknown_namespace(no_fzf, kubeconfig_file, monkeypatch, capsys):
    monkeypatch.setenv("_MOCK_NAMESPACES", "1")
    assert main(["nope"]) == 1
    assert 'no namespace exists with name "nope"' in capsys.readouterr().err


def test_main_warns_about_deprecated_vars(no_fzf, kubeconfig_file, monkeypatch, capsys):
    monkeypatch.setenv("KUBECTX_CURRENT_FGCOLOR", "1")
    assert main(["-V"]) == 0
    captured = capsys.readouterr()
    assert "KUBECTX_CURRENT_FGCOLOR" in captured.err
    assert captured.out == "v0.0.0+unknown\n"