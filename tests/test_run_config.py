"""
Tests for configuration layering and validation.
"""

import argparse
import json

import pytest

from intra_mirror.__main__ import build_parser, load_config
from intra_mirror.errors import ConfigError
from intra_mirror.run_config import MirrorRunConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("INTRA_LOGIN", "INTRA_PASSWORD", "INTRA_OUTPUT_DIR",
                "INTRA_CONCURRENCY", "INTRA_HEADLESS", "INTRA_BASE_URL"):
        monkeypatch.delenv(var, raising=False)


def _write(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestDefaults:

    def test_defaults(self):
        cfg = MirrorRunConfig()
        assert cfg.concurrency == 4
        assert cfg.headless is False
        assert cfg.navigation_timeout_ms == 30_000
        assert cfg.marker_timeout_ms == 10_000
        assert cfg.graph_timeout_ms == 15_000
        assert cfg.viewport == {"width": 1280, "height": 800}


class TestLayering:

    def test_json_keys(self, tmp_path):
        path = _write(tmp_path, {"login": "jdoe", "password": "pw", "outputDir": "out",
                                 "concurrency": 2, "headless": True, "unknown": 1})
        cfg = MirrorRunConfig.from_json(path)
        assert (cfg.login, cfg.password, cfg.output_dir) == ("jdoe", "pw", "out")
        assert cfg.concurrency == 2 and cfg.headless is True

    def test_env_overrides_json(self, tmp_path):
        cfg = MirrorRunConfig.from_json(_write(tmp_path, {"login": "a", "concurrency": 2}))
        cfg.apply_env({"INTRA_LOGIN": "b", "INTRA_CONCURRENCY": "7", "INTRA_HEADLESS": "yes"})
        assert cfg.login == "b"
        assert cfg.concurrency == 7
        assert cfg.headless is True

    def test_cli_overrides_env(self):
        cfg = MirrorRunConfig().apply_env({"INTRA_CONCURRENCY": "7"})
        cfg.apply_cli_args(argparse.Namespace(concurrency=3, login=None))
        assert cfg.concurrency == 3
        assert cfg.login == ""

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(ConfigError):
            MirrorRunConfig.from_json(path)

    def test_non_integer_concurrency(self):
        with pytest.raises(ConfigError):
            MirrorRunConfig().apply_env({"INTRA_CONCURRENCY": "many"})


class TestValidate:

    def test_valid(self):
        MirrorRunConfig(login="a", password="b").validate()

    def test_zero_concurrency(self):
        with pytest.raises(ConfigError):
            MirrorRunConfig(login="a", password="b", concurrency=0).validate()

    def test_missing_credentials(self):
        with pytest.raises(ConfigError):
            MirrorRunConfig(login="a").validate()

    def test_credentials_repr_hides_password(self):
        assert "secret" not in repr(MirrorRunConfig(login="a", password="secret").credentials())


class TestCli:

    def test_flags_applied(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        args = build_parser().parse_args([
            "--login", "jdoe", "--password", "pw", "--concurrency", "2",
            "--headless", "--output-dir", "mirror", "--no-prompt",
        ])
        cfg = load_config(args)
        assert cfg.concurrency == 2
        assert cfg.headless is True
        assert cfg.output_dir == "mirror"

    def test_picks_up_config_json_in_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        _write(tmp_path, {"login": "jdoe", "password": "pw", "concurrency": 6})
        cfg = load_config(build_parser().parse_args(["--no-prompt"]))
        assert cfg.concurrency == 6

    def test_env_credentials_used(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("INTRA_LOGIN", "envuser")
        monkeypatch.setenv("INTRA_PASSWORD", "envpw")
        cfg = load_config(build_parser().parse_args(["--no-prompt"]))
        assert cfg.login == "envuser"

    def test_missing_credentials_without_prompt(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigError):
            load_config(build_parser().parse_args(["--no-prompt"]))
