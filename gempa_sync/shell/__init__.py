"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- BMKG feed client (async HTTP)
- Alert sinks (log, Slack webhook)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from gempa_sync.shell.source_client import RawPayload, SourceClient
from gempa_sync.shell.alert_sink import AlertSink, AlertStatus, create_alert_sink
from gempa_sync.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "RawPayload",
    "SourceClient",
    "AlertSink",
    "AlertStatus",
    "create_alert_sink",
    "load_config",
    "load_config_from_env",
]
