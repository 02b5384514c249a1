from __future__ import annotations

import os

from click.testing import CliRunner

from depget.cli import cli
from depget.config.main_cfg import MainConfig


def test_get_help():
    result = CliRunner().invoke(cli, ["get", "--help"])

    assert result.exit_code == 0
    assert "--dry-run" in result.output
    assert "--update" in result.output


def test_get_alias():
    result = CliRunner().invoke(cli, ["g", "--help"])

    assert result.exit_code == 0


def test_unresolvable_package_exits_non_zero(config_env):
    result = CliRunner().invoke(cli, ["get", "nosuchhost/package"])

    assert result.exit_code == 1
    assert "1 package(s) could not be fetched" in result.output
    assert "unrecognized import path" in result.output
    assert os.path.exists(os.path.join(str(config_env / "config"), MainConfig.NAME))


def test_present_package_is_not_fetched(config_env):
    directory = config_env / "ws" / "src" / "example.org" / "lib"
    directory.mkdir(parents=True)
    (directory / "depget.cfg").write_text("[info]\ntitle = lib\n")

    result = CliRunner().invoke(cli, ["get", "--tree", "example.org/lib"])

    assert result.exit_code == 0


def test_environment_overrides_config(config_env, monkeypatch):
    monkeypatch.setenv("DEPGET_PATH", os.pathsep.join(["/one", "", "/two"]))
    monkeypatch.setenv("DEPGET_VERSION", "2.1 extra")
    config = MainConfig.get_config()

    assert config.get_workspace_paths() == ["/one", "/two"]
    assert config.get_builtin_root() == str(config_env / "builtin")
    assert config.get_toolchain_version() == "2.1 extra"
