"""Command line: server start options and cache maintenance"""

import os

import pytest
from typer.testing import CliRunner

import config.loader as loader
from ajos_backend import cli
from core.cache import CacheStore

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    # Commands replace the process-wide configuration; put it back afterwards
    monkeypatch.setattr(loader, "_config_instance", loader._config_instance)
    monkeypatch.setenv(loader.CONFIG_ENV_VAR, os.environ[loader.CONFIG_ENV_VAR])
    path = tmp_path / "config.toml"
    path.write_text(
        f"[server]\nport = 9123\n[storage]\ncache_path = '{tmp_path / 'cache.db'}'\n",
        encoding="utf-8",
    )
    return path


class TestStart:
    def test_config_file_exported_for_reload(self, config_file, monkeypatch):
        calls = []
        monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

        result = runner.invoke(
            cli.build_cli(), ["start", "--config-file", str(config_file), "--debug"]
        )

        assert result.exit_code == 0
        assert os.environ[loader.CONFIG_ENV_VAR] == str(config_file.resolve())
        app, kwargs = calls[0]
        assert app == "ajos_backend.app:app"
        assert kwargs["port"] == 9123
        assert kwargs["reload"] is True


class TestClearCache:
    def test_removes_every_key(self, config_file):
        cache = CacheStore(str(config_file.parent / "cache.db"))
        cache.write_list("aj26_todos", [{"id": "t1"}])
        cache.set("theme", "dark")

        result = runner.invoke(
            cli.build_cli(), ["clear-cache", "--config-file", str(config_file), "--yes"]
        )

        assert result.exit_code == 0
        assert "Removed 2 cached entries" in result.output
        assert cache.keys() == []

    def test_declined_confirmation_keeps_cache(self, config_file):
        cache = CacheStore(str(config_file.parent / "cache.db"))
        cache.set("theme", "dark")

        result = runner.invoke(
            cli.build_cli(), ["clear-cache", "--config-file", str(config_file)], input="n\n"
        )

        assert result.exit_code != 0
        assert cache.get("theme") == "dark"

    def test_empty_cache(self, config_file):
        result = runner.invoke(
            cli.build_cli(), ["clear-cache", "--config-file", str(config_file), "--yes"]
        )

        assert result.exit_code == 0
        assert "already empty" in result.output
