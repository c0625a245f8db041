"""Tests for the Configuration Loader module.

Tests configuration loading from YAML files and environment variables.
"""

import os
import tempfile
from unittest.mock import patch

from gempa_sync.core.config import Config
from gempa_sync.shell.config_loader import (
    _parse_bool,
    _resolve_value,
    load_config,
    load_config_from_dict,
    load_config_from_env,
)


class TestResolveValue:
    """Tests for _resolve_value function."""

    def test_returns_non_string_unchanged(self):
        assert _resolve_value(123) == 123
        assert _resolve_value(None) is None

    def test_returns_plain_string_unchanged(self):
        assert _resolve_value("https://example.com") == "https://example.com"

    def test_resolves_env_var_placeholder(self):
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert _resolve_value("${TEST_VAR}") == "test_value"

    def test_returns_placeholder_if_env_var_not_set(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _resolve_value("${UNDEFINED_VAR}") == "${UNDEFINED_VAR}"


class TestParseBool:
    def test_values(self):
        assert _parse_bool(True) is True
        assert _parse_bool("yes") is True
        assert _parse_bool("1") is True
        assert _parse_bool("false") is False
        assert _parse_bool("off") is False


class TestLoadConfigFromDict:
    """Tests for load_config_from_dict function."""

    def test_empty_dict_gives_defaults(self):
        assert load_config_from_dict({}) == Config()

    def test_null_sections_give_defaults(self):
        assert load_config_from_dict({"feeds": None, "alerts": None}) == Config()

    def test_full_config(self):
        data = {
            "feeds": {
                "latest_url": "https://mirror.test/autogempa.xml",
                "recent_url": "https://mirror.test/gempaterkini.json",
                "felt_url": "https://mirror.test/gempadirasakan.json",
                "shakemap_base_url": "https://mirror.test/shakemap",
            },
            "poll_interval_seconds": 60,
            "auto_update": False,
            "request_timeout_seconds": 5,
            "alerts": {
                "min_magnitude": 5.5,
                "sink": "none",
            },
        }

        config = load_config_from_dict(data)

        assert config.latest_url == "https://mirror.test/autogempa.xml"
        assert config.felt_url == "https://mirror.test/gempadirasakan.json"
        assert config.shakemap_base_url == "https://mirror.test/shakemap"
        assert config.poll_interval_seconds == 60.0
        assert config.auto_update is False
        assert config.request_timeout_seconds == 5.0
        assert config.notify_min_magnitude == 5.5
        assert config.alert_sink == "none"

    def test_resolves_webhook_placeholder(self):
        data = {"alerts": {"sink": "slack", "slack_webhook_url": "${SLACK_WEBHOOK_URL}"}}

        with patch.dict(os.environ, {"SLACK_WEBHOOK_URL": "https://hooks.slack.com/x"}):
            config = load_config_from_dict(data)

        assert config.slack_webhook_url == "https://hooks.slack.com/x"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_gives_defaults(self):
        assert load_config("/nonexistent/config.yaml") == Config()

    def test_loads_yaml_file(self):
        yaml_content = """
poll_interval_seconds: 45
alerts:
  min_magnitude: 6.5
  sink: log
"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write(yaml_content)
            temp_path = f.name

        try:
            result = load_config(temp_path)

            assert result.poll_interval_seconds == 45
            assert result.notify_min_magnitude == 6.5
            assert result.alert_sink == "log"
        finally:
            os.unlink(temp_path)

    def test_empty_file_gives_defaults(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("")
            temp_path = f.name

        try:
            assert load_config(temp_path) == Config()
        finally:
            os.unlink(temp_path)

    def test_uses_config_path_env_var(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("poll_interval_seconds: 90\n")
            temp_path = f.name

        try:
            with patch.dict(os.environ, {"CONFIG_PATH": temp_path}):
                result = load_config()

            assert result.poll_interval_seconds == 90
        finally:
            os.unlink(temp_path)


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env function."""

    def test_no_env_gives_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            assert load_config_from_env() == Config()

    def test_reads_typed_values(self):
        env = {
            "GEMPA_LATEST_URL": "https://mirror.test/autogempa.xml",
            "GEMPA_POLL_INTERVAL_SECONDS": "15",
            "GEMPA_AUTO_UPDATE": "false",
            "GEMPA_NOTIFY_MIN_MAGNITUDE": "5",
            "GEMPA_REQUEST_TIMEOUT_SECONDS": "2.5",
            "GEMPA_ALERT_SINK": "none",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config_from_env()

        assert config.latest_url == "https://mirror.test/autogempa.xml"
        assert config.poll_interval_seconds == 15.0
        assert config.auto_update is False
        assert config.notify_min_magnitude == 5.0
        assert config.request_timeout_seconds == 2.5
        assert config.alert_sink == "none"

    def test_webhook_selects_slack_sink(self):
        with patch.dict(os.environ, {"SLACK_WEBHOOK_URL": "https://hooks.slack.com/x"}, clear=True):
            config = load_config_from_env()

        assert config.alert_sink == "slack"
        assert config.slack_webhook_url == "https://hooks.slack.com/x"

    def test_explicit_sink_wins_over_webhook(self):
        env = {"SLACK_WEBHOOK_URL": "https://hooks.slack.com/x", "GEMPA_ALERT_SINK": "log"}
        with patch.dict(os.environ, env, clear=True):
            config = load_config_from_env()

        assert config.alert_sink == "log"
