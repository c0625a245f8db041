"""Alert Sinks - Imperative Shell.

An AlertSink is where user-facing alerts go. The engine only depends on
the AlertSink interface; message formatting is in the core module.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

import requests

from gempa_sync.core.formatter import format_slack_payload


logger = logging.getLogger(__name__)


# Default timeout for webhook requests (seconds)
DEFAULT_TIMEOUT = 10


class AlertStatus(str, Enum):
    """Outcome of a notify call."""
    OK = "ok"
    UNAVAILABLE = "unavailable"


class AlertSink(ABC):
    """Capability to show an alert to the user."""

    @abstractmethod
    def permission_granted(self) -> bool:
        """Whether alerts may be shown."""

    def request_permission(self) -> bool:
        """Ask for permission to alert. Returns the resulting state."""
        return self.permission_granted()

    @abstractmethod
    def notify(self, title: str, body: str) -> AlertStatus:
        """Show one alert."""


class LoggingAlertSink(AlertSink):
    """Writes alerts to the log. Always permitted."""

    def permission_granted(self) -> bool:
        return True

    def notify(self, title: str, body: str) -> AlertStatus:
        logger.warning("ALERT %s %s", title, body)
        return AlertStatus.OK


class DeniedAlertSink(AlertSink):
    """A sink whose permission is never granted."""

    def permission_granted(self) -> bool:
        return False

    def notify(self, title: str, body: str) -> AlertStatus:
        return AlertStatus.UNAVAILABLE


class SlackAlertSink(AlertSink):
    """Sends alerts to Slack via an incoming webhook.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(self, webhook_url: str, timeout: int = DEFAULT_TIMEOUT) -> None:
        """Initialize Slack sink.

        Args:
            webhook_url: Slack incoming webhook URL
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    def permission_granted(self) -> bool:
        """Permitted once a webhook URL is configured."""
        return bool(self.webhook_url) and not self.webhook_url.startswith("${")

    def notify(self, title: str, body: str) -> AlertStatus:
        """Send an alert to Slack via webhook.

        This method performs HTTP I/O.

        Args:
            title: Alert title
            body: Alert body

        Returns:
            OK if Slack accepted the message, UNAVAILABLE otherwise
        """
        if not self.permission_granted():
            logger.warning("Slack webhook not configured, dropping alert")
            return AlertStatus.UNAVAILABLE

        logger.info("Sending alert to Slack webhook")

        try:
            response = requests.post(
                self.webhook_url,
                json=format_slack_payload(title, body),
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )

            if response.status_code == 200:
                logger.info("Alert sent successfully to Slack")
                return AlertStatus.OK
            else:
                logger.warning(
                    "Slack webhook returned non-200: %d - %s",
                    response.status_code,
                    response.text,
                )
                return AlertStatus.UNAVAILABLE

        except requests.Timeout:
            logger.error("Slack webhook request timed out")
            return AlertStatus.UNAVAILABLE
        except requests.RequestException as e:
            logger.error("Slack webhook request failed: %s", str(e))
            return AlertStatus.UNAVAILABLE


def create_alert_sink(sink_type: str, slack_webhook_url: str = "") -> AlertSink:
    """Create the alert sink named in configuration.

    Args:
        sink_type: 'log', 'slack' or 'none'
        slack_webhook_url: Webhook URL for the 'slack' sink

    Returns:
        AlertSink instance

    Raises:
        ValueError: If the sink type is unknown
    """
    if sink_type == "log":
        return LoggingAlertSink()
    elif sink_type == "slack":
        return SlackAlertSink(slack_webhook_url)
    elif sink_type == "none":
        return DeniedAlertSink()

    raise ValueError(f"Unknown alert sink type: {sink_type}")
