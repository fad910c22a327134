from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from arcwatch.config import (
    ArcwatchConfig,
    _parse_section,
    _pyproject_has_section,
    _read_toml,
    discover_config_file,
    load_config,
)
from arcwatch.exceptions import ConfigError


@pytest.mark.unit
class TestArcwatchConfig:
    """Tests for ArcwatchConfig dataclass."""

    def test_default_initialization(self) -> None:
        """Test ArcwatchConfig initializes with correct defaults."""
        config = ArcwatchConfig()

        assert config.include_indirect is False
        assert config.cache_ttl == 3600
        assert config.cache_cleanup_interval == 7200
        assert config.max_workers is None
        assert config.api_url == "https://api.github.com"
        assert config.request_delay == 0.0
        assert config.source_path is None

    def test_to_log_dict_excludes_metadata(self) -> None:
        """Test to_log_dict returns options only."""
        config = ArcwatchConfig(include_indirect=True, source_path=Path("/x/arcwatch.toml"))

        result = config.to_log_dict()

        assert result["include_indirect"] is True
        assert "source_path" not in result


@pytest.mark.unit
class TestDiscoverConfigFile:
    """Tests for discover_config_file."""

    def test_explicit_path_priority(self, tmp_path: Path) -> None:
        """Test an explicit path wins over auto-discovery."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[arcwatch]\n", encoding="utf-8")
        (tmp_path / "arcwatch.toml").write_text("[arcwatch]\n", encoding="utf-8")

        with patch("arcwatch.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file(config_file)

        assert result == config_file.resolve()

    def test_explicit_path_not_found(self, tmp_path: Path) -> None:
        """Test a missing explicit path raises ConfigError."""
        missing = tmp_path / "missing.toml"

        with pytest.raises(ConfigError, match="Configuration file not found") as exc_info:
            discover_config_file(missing)

        assert exc_info.value.config_path == str(missing)

    def test_arcwatch_toml_discovered(self, tmp_path: Path) -> None:
        """Test arcwatch.toml in the working directory is found."""
        (tmp_path / "arcwatch.toml").write_text("[arcwatch]\n", encoding="utf-8")

        with patch("arcwatch.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == tmp_path / "arcwatch.toml"

    def test_pyproject_with_section_discovered(self, tmp_path: Path) -> None:
        """Test pyproject.toml is used only with a [tool.arcwatch] table."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.arcwatch]\ninclude_indirect = true\n", encoding="utf-8")

        with patch("arcwatch.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == pyproject

    def test_pyproject_without_section_ignored(self, tmp_path: Path) -> None:
        """Test an unrelated pyproject.toml is not a config file."""
        (tmp_path / "pyproject.toml").write_text("[tool.black]\n", encoding="utf-8")

        with patch("arcwatch.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() is None

    def test_arcwatch_toml_beats_pyproject(self, tmp_path: Path) -> None:
        """Test arcwatch.toml takes precedence over pyproject.toml."""
        (tmp_path / "arcwatch.toml").write_text("[arcwatch]\n", encoding="utf-8")
        (tmp_path / "pyproject.toml").write_text("[tool.arcwatch]\n", encoding="utf-8")

        with patch("arcwatch.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == tmp_path / "arcwatch.toml"


@pytest.mark.unit
class TestPyprojectHasSection:
    """Tests for _pyproject_has_section."""

    def test_invalid_toml_has_no_section(self, tmp_path: Path) -> None:
        """Test a broken pyproject.toml is treated as having no section."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.arcwatch\n", encoding="utf-8")

        assert _pyproject_has_section(pyproject) is False


@pytest.mark.unit
class TestReadToml:
    """Tests for _read_toml."""

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Test invalid TOML raises ConfigError."""
        path = tmp_path / "arcwatch.toml"
        path.write_text("not = [valid", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            _read_toml(path)

    def test_unreadable_file(self, tmp_path: Path) -> None:
        """Test an unreadable path raises ConfigError."""
        with pytest.raises(ConfigError, match="Cannot read configuration file"):
            _read_toml(tmp_path / "missing.toml")


@pytest.mark.unit
class TestParseSection:
    """Tests for _parse_section validation."""

    def test_all_options(self) -> None:
        """Test every option is applied."""
        config = _parse_section(
            {
                "include_indirect": True,
                "cache_ttl": 120,
                "cache_cleanup_interval": 240,
                "max_workers": 8,
                "api_url": " https://ghe.example.com/api/v3 ",
                "request_delay": 1,
            },
            config_path="arcwatch.toml",
        )

        assert config.include_indirect is True
        assert config.cache_ttl == 120
        assert config.cache_cleanup_interval == 240
        assert config.max_workers == 8
        assert config.api_url == "https://ghe.example.com/api/v3"
        assert config.request_delay == 1.0
        assert isinstance(config.request_delay, float)

    def test_unknown_keys(self) -> None:
        """Test unknown keys are rejected by name."""
        with pytest.raises(ConfigError, match="Unknown configuration keys: colour, workers"):
            _parse_section({"workers": 1, "colour": True}, config_path="arcwatch.toml")

    def test_include_indirect_must_be_bool(self) -> None:
        """Test include_indirect rejects non-booleans."""
        with pytest.raises(ConfigError, match="include_indirect must be a boolean") as exc_info:
            _parse_section({"include_indirect": "yes"}, config_path="arcwatch.toml")

        assert exc_info.value.option == "include_indirect"

    @pytest.mark.parametrize("option", ["cache_ttl", "cache_cleanup_interval", "max_workers"])
    @pytest.mark.parametrize(
        "value, message",
        [("10", "must be an integer"), (True, "must be an integer"), (0, "must be positive")],
        ids=["string", "bool", "zero"],
    )
    def test_positive_integers(self, option: str, value, message: str) -> None:
        """Test integer options reject wrong types and non-positive values."""
        with pytest.raises(ConfigError, match=f"{option} {message}"):
            _parse_section({option: value}, config_path="arcwatch.toml")

    @pytest.mark.parametrize("value", ["", "   ", 42])
    def test_api_url_must_be_non_empty_string(self, value) -> None:
        """Test api_url rejects blanks and non-strings."""
        with pytest.raises(ConfigError, match="api_url must be a non-empty string"):
            _parse_section({"api_url": value}, config_path="arcwatch.toml")

    @pytest.mark.parametrize(
        "value, message",
        [("0.5", "must be a number"), (False, "must be a number"), (-1, "must not be negative")],
        ids=["string", "bool", "negative"],
    )
    def test_request_delay_validation(self, value, message: str) -> None:
        """Test request_delay accepts only non-negative numbers."""
        with pytest.raises(ConfigError, match=f"request_delay {message}") as exc_info:
            _parse_section({"request_delay": value}, config_path="arcwatch.toml")

        assert exc_info.value.option == "request_delay"

    def test_request_delay_zero_allowed(self) -> None:
        """Test a zero request_delay disables spacing."""
        config = _parse_section({"request_delay": 0}, config_path="arcwatch.toml")

        assert config.request_delay == 0.0


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        """Test defaults are returned when no file is found."""
        with patch("arcwatch.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config == ArcwatchConfig()

    def test_load_arcwatch_toml(self, tmp_path: Path) -> None:
        """Test values are loaded from the [arcwatch] table."""
        path = tmp_path / "arcwatch.toml"
        path.write_text("[arcwatch]\ninclude_indirect = true\nmax_workers = 4\n", encoding="utf-8")

        config = load_config(path)

        assert config.include_indirect is True
        assert config.max_workers == 4
        assert config.source_path == path.resolve()

    def test_load_pyproject(self, tmp_path: Path) -> None:
        """Test values are loaded from [tool.arcwatch]."""
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.arcwatch]\ncache_ttl = 60\n", encoding="utf-8")

        config = load_config(path)

        assert config.cache_ttl == 60

    def test_file_without_section(self, tmp_path: Path) -> None:
        """Test a file without an arcwatch table yields defaults with a source."""
        path = tmp_path / "custom.toml"
        path.write_text("[other]\nkey = 1\n", encoding="utf-8")

        config = load_config(path)

        assert config.include_indirect is False
        assert config.source_path == path.resolve()

    def test_invalid_value_propagates(self, tmp_path: Path) -> None:
        """Test validation errors surface as ConfigError."""
        path = tmp_path / "arcwatch.toml"
        path.write_text("[arcwatch]\ncache_ttl = -5\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="cache_ttl must be positive"):
            load_config(path)
