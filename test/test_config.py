"""Tests for configuration loading and command line resolution."""

from pathlib import Path

import pytest

from docedit.config import Config, load_config_file
from docedit.exceptions import ConfigurationError
from docedit.main_mcp import build_parser, resolve_config


class TestConfigFromEnv:
    """Test environment and file configuration"""

    def test_defaults(self):
        """Test an empty environment yields the defaults"""
        config = Config.from_env({})
        assert config.transport == "stdio"
        assert config.mcp_port == 8020
        assert config.max_sessions == 10
        assert config.log_json is False
        assert config.data_dir is None
        assert config.idle_timeout_minutes == 30

    def test_environment_overrides(self):
        """Test DOCEDIT_* variables are parsed into typed values"""
        config = Config.from_env(
            {
                "DOCEDIT_TRANSPORT": "HTTP",
                "DOCEDIT_MCP_PORT": "9000",
                "DOCEDIT_LOG_LEVEL": "debug",
                "DOCEDIT_LOG_JSON": "yes",
                "DOCEDIT_MAX_FILE_SIZE_MB": "2.5",
            }
        )
        assert config.transport == "http"
        assert config.mcp_port == 9000
        assert config.log_level == "DEBUG"
        assert config.log_json is True
        assert config.max_file_size_mb == 2.5

    def test_empty_variable_is_ignored(self):
        """Test an empty variable leaves the default"""
        assert Config.from_env({"DOCEDIT_MCP_PORT": ""}).mcp_port == 8020

    def test_session_idle_timeout_variables(self):
        """Test the idle timeout and sweep interval variables"""
        config = Config.from_env(
            {
                "DOCEDIT_SESSION_IDLE_TIMEOUT_MINS": "0",
                "DOCEDIT_SESSION_SWEEP_INTERVAL_SECONDS": "5",
            }
        )
        assert config.idle_timeout_minutes == 0
        assert config.sweep_interval_seconds == 5

    def test_idle_timeout_from_config_file(self, tmp_path):
        """Test the file uses the field name"""
        config_file = tmp_path / "docedit.yaml"
        config_file.write_text("idle_timeout_minutes: 2.5\n", encoding="utf-8")
        config = Config.from_env({"DOCEDIT_CONFIG_FILE": str(config_file)})
        assert config.idle_timeout_minutes == 2.5

    def test_config_file_with_env_precedence(self, tmp_path):
        """Test file values apply and environment variables win"""
        config_file = tmp_path / "docedit.yaml"
        config_file.write_text("max_sessions: 4\nMCP_PORT: 7000\n", encoding="utf-8")
        config = Config.from_env(
            {"DOCEDIT_CONFIG_FILE": str(config_file), "DOCEDIT_MCP_PORT": "7100"}
        )
        assert config.max_sessions == 4
        assert config.mcp_port == 7100

    @pytest.mark.parametrize(
        "environ",
        [
            {"DOCEDIT_MCP_PORT": "not-a-port"},
            {"DOCEDIT_MCP_PORT": "70000"},
            {"DOCEDIT_TRANSPORT": "carrier-pigeon"},
            {"DOCEDIT_LOG_LEVEL": "LOUD"},
            {"DOCEDIT_LOG_JSON": "maybe"},
            {"DOCEDIT_MAX_SESSIONS": "0"},
            {"DOCEDIT_SESSION_IDLE_TIMEOUT_MINS": "-1"},
            {"DOCEDIT_SESSION_SWEEP_INTERVAL_SECONDS": "0"},
        ],
    )
    def test_invalid_values(self, environ):
        """Test bad values raise ConfigurationError"""
        with pytest.raises(ConfigurationError):
            Config.from_env(environ)

    def test_unknown_key(self):
        """Test unknown keys in a mapping are rejected"""
        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_mapping({"colour": "blue"})
        assert exc_info.value.details["unknown"] == ["colour"]


class TestConfigFile:
    """Test YAML file loading"""

    def test_missing_file(self, tmp_path):
        """Test a missing file is a configuration error"""
        with pytest.raises(ConfigurationError):
            load_config_file(str(tmp_path / "absent.yaml"))

    def test_not_a_mapping(self, tmp_path):
        """Test a YAML list is rejected"""
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config_file(str(config_file))

    def test_empty_file(self, tmp_path):
        """Test an empty file is an empty mapping"""
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")
        assert load_config_file(str(config_file)) == {}


class TestResolvePath:
    """Test document path resolution"""

    def test_relative_path_uses_data_dir(self, tmp_path):
        """Test relative paths resolve against data_dir"""
        config = Config(data_dir=str(tmp_path))
        assert config.resolve_path("reports/q1.xlsx") == tmp_path / "reports" / "q1.xlsx"

    def test_absolute_path_unchanged(self, tmp_path):
        """Test absolute paths ignore data_dir"""
        config = Config(data_dir="/srv/docs")
        target = tmp_path / "a.docx"
        assert config.resolve_path(str(target)) == target

    def test_without_data_dir(self):
        """Test relative paths stay relative without data_dir"""
        assert Config().resolve_path("a.pdf") == Path("a.pdf")


class TestCommandLine:
    """Test flag resolution on top of the environment"""

    def test_flags_override_environment(self):
        """Test command line flags win over environment variables"""
        args = build_parser().parse_args(["--transport", "http", "--port", "8100", "--log-json"])
        config = resolve_config(args, {"DOCEDIT_MCP_PORT": "9000", "DOCEDIT_MAX_SESSIONS": "3"})
        assert config.transport == "http"
        assert config.mcp_port == 8100
        assert config.max_sessions == 3
        assert config.log_json is True

    def test_config_file_flag(self, tmp_path):
        """Test --config-file is read"""
        config_file = tmp_path / "docedit.yaml"
        config_file.write_text("data_dir: /srv/docs\n", encoding="utf-8")
        args = build_parser().parse_args(["--config-file", str(config_file)])
        assert resolve_config(args, {}).data_dir == "/srv/docs"

    def test_invalid_transport_flag(self):
        """Test argparse rejects unknown transports"""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--transport", "smtp"])

    def test_invalid_port_flag(self):
        """Test out-of-range ports fail configuration"""
        args = build_parser().parse_args(["--port", "0"])
        with pytest.raises(ConfigurationError):
            resolve_config(args, {})

    def test_session_idle_timeout_flag(self):
        """Test --session-idle-timeout overrides the environment, 0 included"""
        args = build_parser().parse_args(["--session-idle-timeout", "0"])
        config = resolve_config(args, {"DOCEDIT_SESSION_IDLE_TIMEOUT_MINS": "45"})
        assert config.idle_timeout_minutes == 0
