"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in gempa_sync/core/config.py to avoid
information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from gempa_sync.core.config import Config


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"

# Environment variable -> Config field
ENV_FIELDS = {
    "GEMPA_LATEST_URL": "latest_url",
    "GEMPA_RECENT_URL": "recent_url",
    "GEMPA_FELT_URL": "felt_url",
    "GEMPA_SHAKEMAP_BASE_URL": "shakemap_base_url",
    "GEMPA_POLL_INTERVAL_SECONDS": "poll_interval_seconds",
    "GEMPA_AUTO_UPDATE": "auto_update",
    "GEMPA_NOTIFY_MIN_MAGNITUDE": "notify_min_magnitude",
    "GEMPA_REQUEST_TIMEOUT_SECONDS": "request_timeout_seconds",
    "GEMPA_ALERT_SINK": "alert_sink",
    "SLACK_WEBHOOK_URL": "slack_webhook_url",
}


def _resolve_value(value: Any) -> Any:
    """Resolve a value that may be a ${VAR} environment placeholder.

    Args:
        value: Value to resolve

    Returns:
        Resolved value, or the placeholder unchanged if the variable is unset
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_bool(value: Any) -> bool:
    """Parse a YAML or environment boolean."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _parse_optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()
    feeds = data.get("feeds") or {}
    alerts = data.get("alerts") or {}

    return Config(
        latest_url=_resolve_value(feeds.get("latest_url", defaults.latest_url)),
        recent_url=_resolve_value(feeds.get("recent_url", defaults.recent_url)),
        felt_url=_resolve_value(feeds.get("felt_url", defaults.felt_url)),
        shakemap_base_url=_resolve_value(
            feeds.get("shakemap_base_url", defaults.shakemap_base_url)
        ),
        poll_interval_seconds=float(
            data.get("poll_interval_seconds", defaults.poll_interval_seconds)
        ),
        auto_update=_parse_bool(data.get("auto_update", defaults.auto_update)),
        notify_min_magnitude=float(
            alerts.get("min_magnitude", defaults.notify_min_magnitude)
        ),
        request_timeout_seconds=_parse_optional_float(
            data.get("request_timeout_seconds")
        ),
        alert_sink=alerts.get("sink", defaults.alert_sink),
        slack_webhook_url=_resolve_value(alerts.get("slack_webhook_url", "")),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: polling every %ss, alert sink '%s'",
        config.poll_interval_seconds,
        config.alert_sink,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file. Unset variables
    keep their defaults.

    Environment variables:
        GEMPA_LATEST_URL, GEMPA_RECENT_URL, GEMPA_FELT_URL: Feed URLs
        GEMPA_SHAKEMAP_BASE_URL: Shakemap image base URL
        GEMPA_POLL_INTERVAL_SECONDS: Background refresh period
        GEMPA_AUTO_UPDATE: Start with background refresh enabled
        GEMPA_NOTIFY_MIN_MAGNITUDE: Alert threshold
        GEMPA_REQUEST_TIMEOUT_SECONDS: HTTP timeout
        GEMPA_ALERT_SINK: 'log', 'slack' or 'none'
        SLACK_WEBHOOK_URL: Webhook URL for the Slack sink

    Returns:
        Config object from environment
    """
    config = Config()

    for env_name, field_name in ENV_FIELDS.items():
        raw = os.environ.get(env_name)
        if raw is None or raw == "":
            continue

        if field_name in ("poll_interval_seconds", "notify_min_magnitude"):
            value: Any = float(raw)
        elif field_name == "request_timeout_seconds":
            value = _parse_optional_float(raw)
        elif field_name == "auto_update":
            value = _parse_bool(raw)
        else:
            value = raw

        setattr(config, field_name, value)

    # A webhook alone is enough to pick the Slack sink
    if "GEMPA_ALERT_SINK" not in os.environ and config.slack_webhook_url:
        config.alert_sink = "slack"

    return config
