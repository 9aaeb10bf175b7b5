import os
import sys

from kubectx.ns.statefile import NSFile, is_windows


def test_nsfile_load_and_save(tmp_path):
    f = NSFile("foo", directory=str(tmp_path))
    assert f.load() == ""

    f.save("bar")
    assert f.load() == "bar"


def test_nsfile_save_creates_directories(tmp_path):
    directory = tmp_path / "a" / "b"
    f = NSFile("ctx", directory=str(directory))
    f.save("ns1")
    assert (directory / "ctx").read_text(encoding="utf-8") == "ns1"


def test_nsfile_load_strips_whitespace(tmp_path):
    (tmp_path / "ctx").write_text("  ns1\n", encoding="utf-8")
    assert NSFile("ctx", directory=str(tmp_path)).load() == "ns1"


def test_nsfile_path_windows(monkeypatch):
    monkeypatch.setenv("_FORCE_GOOS", "windows")
    fp = NSFile("a:b:c").path()
    assert fp.endswith("a__b__c")


def test_nsfile_path_keeps_colons_elsewhere(monkeypatch, tmp_path):
    monkeypatch.delenv("_FORCE_GOOS", raising=False)
    monkeypatch.setattr(sys, "platform", "linux")
    fp = NSFile("a:b:c", directory=str(tmp_path)).path()
    assert fp == os.path.join(str(tmp_path), "a:b:c")


def test_default_directory_under_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("_FORCE_GOOS", raising=False)
    monkeypatch.setattr(sys, "platform", "linux")
    assert NSFile("ctx").path() == os.path.join(str(tmp_path), ".kube", "kubens", "ctx")


def test_is_windows(monkeypatch):
    monkeypatch.delenv("_FORCE_GOOS", raising=False)
    monkeypatch.setattr(sys, "platform", "linux")
    assert is_windows() is False

    monkeypatch.setenv("_FORCE_GOOS", "windows")
    assert is_windows() is True