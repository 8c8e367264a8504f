"""Unit tests for the init-config command."""

from __future__ import annotations

import os
import stat
import tomllib
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from privfile.commands.init_config import cli
from privfile.config import DEFAULT_CONFIG_TEXT


class TestDefaultConfigText:
    def test_is_valid_toml(self) -> None:
        data = tomllib.loads(DEFAULT_CONFIG_TEXT)
        assert set(data) == {"paths", "display", "security"}


class TestInitConfigCommand:
    def test_creates_config_file(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["--output", "test-config.toml"], standalone_mode=False)
            assert result.exception is None
            assert Path("test-config.toml").read_text() == DEFAULT_CONFIG_TEXT

    def test_fails_if_exists_without_force(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test-config.toml").write_text("existing")
            result = runner.invoke(cli, ["--output", "test-config.toml"], standalone_mode=False)
            assert isinstance(result.exception, SystemExit)
            assert result.exception.code == 1
            assert Path("test-config.toml").read_text() == "existing"

    def test_force_overwrites_existing(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test-config.toml").write_text("old content")
            result = runner.invoke(
                cli, ["--output", "test-config.toml", "--force"], standalone_mode=False
            )
            assert result.exception is None
            content = Path("test-config.toml").read_text()
            assert "[paths]" in content
            assert "old content" not in content

    def test_creates_parent_directories(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli, ["--output", "deep/nested/dir/config.toml"], standalone_mode=False
            )
            assert result.exception is None
            assert Path("deep/nested/dir/config.toml").exists()

    @pytest.mark.skipif(os.name != "posix", reason="requires POSIX mode bits")
    def test_config_file_permissions(self, tmp_path: Path) -> None:
        output = tmp_path / "privfile" / "config.toml"
        result = CliRunner().invoke(cli, ["--output", str(output)], standalone_mode=False)
        assert result.exception is None
        assert stat.S_IMODE(output.stat().st_mode) == 0o600
        assert stat.S_IMODE(output.parent.stat().st_mode) == 0o700

    def test_default_path_used_when_no_output(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            mock_path = MagicMock(return_value=Path("default-config.toml"))
            with patch("privfile.commands.init_config.get_default_config_path", mock_path):
                result = runner.invoke(cli, [], standalone_mode=False)
                assert result.exception is None
                assert Path("default-config.toml").exists()
