"""
Unit tests for server configuration and the CLI.
"""

import dataclasses
from pathlib import Path

import pytest

from fileserver import ServerConfig, __version__
from fileserver.__main__ import build_parser


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.directory == Path(".")
        assert config.host == "127.0.0.1"
        assert config.port == 4221
        assert config.timeout is None
        config.validate()

    def test_directory_coerced_to_path(self):
        assert ServerConfig(directory="/tmp/x").directory == Path("/tmp/x")

    def test_frozen(self):
        config = ServerConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.port = 8080

    def test_replace(self):
        config = dataclasses.replace(ServerConfig(), port=0, directory="/srv")

        assert config.port == 0
        assert config.directory == Path("/srv")

    @pytest.mark.parametrize("overrides", [
        {"port": -1},
        {"port": 65536},
        {"backlog": 0},
        {"timeout": 0},
        {"timeout": -1.5},
        {"log_level": "LOUD"},
    ])
    def test_validate_rejects(self, overrides):
        with pytest.raises(ValueError):
            ServerConfig(**overrides).validate()

    def test_validate_accepts_lowercase_level(self):
        ServerConfig(log_level="debug", timeout=2.0, port=0).validate()


class TestCLI:
    """Tests for command-line parsing."""

    def test_default_directory(self):
        args = build_parser().parse_args([])
        assert args.directory == "."

    @pytest.mark.parametrize("argv", [
        ["--directory", "/tmp/files"],
        ["-d", "/tmp/files"],
    ])
    def test_directory(self, argv):
        assert build_parser().parse_args(argv).directory == "/tmp/files"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_unknown_argument(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--port", "80"])
        assert exc_info.value.code == 2
