import io
import sys

import pytest

from kubectx.cmdutil import CommandError
from kubectx.ctx.cli import (
    VERSION,
    HelpOp,
    InteractiveDeleteOp,
    InteractiveSwitchOp,
    UnsupportedOp,
    VersionOp,
    main,
    parse_args,
    print_usage,
)
from kubectx.ctx.operations import (
    CurrentOp,
    DeleteOp,
    ListOp,
    RenameOp,
    SwitchOp,
    UnsetOp,
)

KUBECONFIG_TEXT = """apiVersion: v1
kind: Config
current-context: c1
contexts:
- name: c1
- name: c2
"""


@pytest.fixture(autouse=True)
def _no_fzf(monkeypatch):
    monkeypatch.setenv("KUBECTX_IGNORE_FZF", "1")


@pytest.fixture
def kubeconfig(tmp_path, monkeypatch):
    path = tmp_path / "config"
    path.write_text(KUBECONFIG_TEXT, encoding="utf-8")
    monkeypatch.setenv("KUBECONFIG", str(path))
    monkeypatch.setenv("HOME", str(tmp_path))
    return path


@pytest.mark.parametrize(
    "args, want",
    [
        (None, ListOp()),
        ([], ListOp()),
        (["-h"], HelpOp()),
        (["--help"], HelpOp()),
        (["-c"], CurrentOp()),
        (["--current"], CurrentOp()),
        (["-u"], UnsetOp()),
        (["--unset"], UnsetOp()),
        (["foo"], SwitchOp(target="foo")),
        (["-"], SwitchOp(target="-")),
        (["-d"], UnsupportedOp("'-d' needs arguments")),
        (["-d", "."], DeleteOp(contexts=["."])),
        (["-d", ".", "a", "b"], DeleteOp(contexts=[".", "a", "b"])),
        (["a=b"], RenameOp(new="a", old="b")),
        (["a=."], RenameOp(new="a", old=".")),
        (["-x"], UnsupportedOp("unsupported option '-x'")),
        (["a", "b", "c"], UnsupportedOp("too many arguments")),
    ],
)
def test_parse_args(args, want):
    assert parse_args(args) == want


def test_parse_args_version():
    assert parse_args(["-V"]) == VersionOp()
    assert parse_args(["--version"]) == VersionOp()


def test_help_op_prints_usage():
    buf = io.StringIO()
    HelpOp().run(buf, buf)
    out = buf.getvalue()
    assert "USAGE:" in out
    assert out.endswith("\n")


def test_print_usage_as_kubectl_plugin(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["/usr/bin/kubectl-ctx"])
    buf = io.StringIO()
    print_usage(buf)
    out = buf.getvalue()
    assert "kubectl ctx -c, --current" in out
    assert "%PROG%" not in out
    assert "%SPAC%" not in out


def test_version_op():
    buf = io.StringIO()
    VersionOp().run(buf, io.StringIO())
    assert buf.getvalue() == VERSION + "\n"


def test_unsupported_op_raises():
    with pytest.raises(CommandError, match="too many arguments"):
        UnsupportedOp("too many arguments").run(io.StringIO(), io.StringIO())


def test_interactive_switch_without_kubeconfig_warns(tmp_path, monkeypatch):
    monkeypatch.setenv("KUBECONFIG", str(tmp_path / "missing"))
    err = io.StringIO()
    InteractiveSwitchOp(self_cmd="kubectx").run(io.StringIO(), err)
    assert "kubeconfig file not found" in err.getvalue()


def test_interactive_delete_without_contexts(tmp_path, monkeypatch):
    path = tmp_path / "config"
    path.write_text("apiVersion: v1\nkind: Config\n", encoding="utf-8")
    monkeypatch.setenv("KUBECONFIG", str(path))
    with pytest.raises(CommandError, match="no contexts found in config"):
        InteractiveDeleteOp(self_cmd="kubectx").run(io.StringIO(), io.StringIO())


def test_main_help(capsys):
    assert main(["--help"]) == 0
    assert "USAGE:" in capsys.readouterr().out


def test_main_unsupported_option(capsys):
    assert main(["-x"]) == 1
    assert "unsupported option '-x'" in capsys.readouterr().err


def test_main_deprecated_env_warning(monkeypatch, capsys):
    monkeypatch.setenv("KUBECTX_CURRENT_FGCOLOR", "1")
    assert main(["-V"]) == 0
    captured = capsys.readouterr()
    assert "KUBECTX_CURRENT_FGCOLOR" in captured.err
    assert captured.out == VERSION + "\n"


def test_main_current(kubeconfig, capsys):
    assert main(["-c"]) == 0
    assert capsys.readouterr().out == "c1\n"


def test_main_switch_updates_kubeconfig(kubeconfig, tmp_path, capsys):
    assert main(["c2"]) == 0
    assert "current-context: c2" in kubeconfig.read_text(encoding="utf-8")
    assert (tmp_path / ".kube" / "kubectx").read_text(encoding="utf-8") == "c1"
    assert "Switched to context" in capsys.readouterr().err


def test_main_switch_to_missing_context(kubeconfig, capsys):
    assert main(["nope"]) == 1
    assert 'no context exists with the name: "nope"' in capsys.readouterr().err