from __future__ import annotations

import os

from depget.helper.lockfile import DepgetLock


def test_lock_is_exclusive(tmp_path, monkeypatch):
    monkeypatch.setenv("DEPGET_CONFIG_DIR", str(tmp_path / "config"))

    first = DepgetLock("get", workspace=str(tmp_path / "ws"))
    second = DepgetLock("get", workspace=str(tmp_path / "ws"))

    assert first.access
    assert not second.access
    assert os.path.exists(first.lockfile_path)
    assert first.read_owner() == (str(os.getpid()), "get")

    first.unlock()
    assert not os.path.exists(first.lockfile_path)
    assert DepgetLock("get", workspace=str(tmp_path / "ws")).access


def test_workspaces_are_locked_separately(tmp_path, monkeypatch):
    monkeypatch.setenv("DEPGET_CONFIG_DIR", str(tmp_path / "config"))

    with DepgetLock("get", workspace=str(tmp_path / "one")) as first:
        with DepgetLock("get", workspace=str(tmp_path / "two")) as second:
            assert first.access
            assert second.access
            assert first.lockfile_path != second.lockfile_path

    assert not os.path.exists(first.lockfile_path)
    assert not os.path.exists(second.lockfile_path)


def test_stale_lock_is_replaced(tmp_path, monkeypatch):
    monkeypatch.setenv("DEPGET_CONFIG_DIR", str(tmp_path))
    monkeypatch.setattr(DepgetLock, "_is_process_running", staticmethod(lambda pid: False))
    workspace = str(tmp_path / "ws")
    with open(DepgetLock.path_for(workspace), "w") as f:
        f.write("999999\nget")

    lock = DepgetLock("get", workspace=workspace)

    assert lock.access
    assert lock.read_owner() == (str(os.getpid()), "get")
    lock.unlock()


def test_lock_without_creating_file(tmp_path, monkeypatch):
    monkeypatch.setenv("DEPGET_CONFIG_DIR", str(tmp_path))

    lock = DepgetLock("tree", create_lock=False)

    assert lock.access
    assert not os.path.exists(lock.lockfile_path)
