"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from gempa_sync.core.event import STRONG_THRESHOLD
from gempa_sync.core.feeds import (
    DEFAULT_FELT_URL,
    DEFAULT_LATEST_URL,
    DEFAULT_RECENT_URL,
    DEFAULT_SHAKEMAP_BASE_URL,
)


ALERT_SINK_TYPES = ("log", "slack", "none")


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        latest_url: Latest-event XML feed
        recent_url: Recent events JSON feed
        felt_url: Felt events JSON feed
        shakemap_base_url: Base URL shakemap references are resolved against
        poll_interval_seconds: Background refresh period
        auto_update: Whether background refreshes start enabled
        notify_min_magnitude: Minimum latest-event magnitude that alerts
        request_timeout_seconds: HTTP timeout, None for the transport default
        alert_sink: Where alerts go: 'log', 'slack' or 'none'
        slack_webhook_url: Webhook URL for the 'slack' sink
    """
    latest_url: str = DEFAULT_LATEST_URL
    recent_url: str = DEFAULT_RECENT_URL
    felt_url: str = DEFAULT_FELT_URL
    shakemap_base_url: str = DEFAULT_SHAKEMAP_BASE_URL
    poll_interval_seconds: float = 30
    auto_update: bool = True
    notify_min_magnitude: float = STRONG_THRESHOLD
    request_timeout_seconds: float | None = None
    alert_sink: str = "log"
    slack_webhook_url: str = ""


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_url(url: str, field_name: str) -> list[ValidationError]:
    """Validate that a URL is an absolute http(s) URL.

    Pure function.
    """
    if not url:
        return [ValidationError(field=field_name, message="URL is empty")]

    if not url.startswith(("http://", "https://")):
        return [ValidationError(
            field=field_name,
            message=f"URL must start with http:// or https://, got '{url}'",
        )]

    return []


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    for name in ("latest_url", "recent_url", "felt_url", "shakemap_base_url"):
        errors.extend(validate_url(getattr(config, name), name))

    if config.poll_interval_seconds <= 0:
        errors.append(ValidationError(
            field="poll_interval_seconds",
            message=f"Polling interval must be positive, got {config.poll_interval_seconds}",
        ))

    if config.request_timeout_seconds is not None and config.request_timeout_seconds <= 0:
        errors.append(ValidationError(
            field="request_timeout_seconds",
            message=f"Request timeout must be positive, got {config.request_timeout_seconds}",
        ))

    if config.alert_sink not in ALERT_SINK_TYPES:
        errors.append(ValidationError(
            field="alert_sink",
            message=f"Unknown alert sink '{config.alert_sink}', expected one of {', '.join(ALERT_SINK_TYPES)}",
        ))

    # Warn about missing webhook
    if config.alert_sink == "slack":
        webhook = config.slack_webhook_url
        if not webhook or webhook.startswith("${"):
            errors.append(ValidationError(
                field="slack_webhook_url",
                message="Webhook URL not resolved (still contains placeholder)",
                severity="warning",
            ))

    if config.notify_min_magnitude < 0:
        errors.append(ValidationError(
            field="notify_min_magnitude",
            message=f"Alert magnitude threshold must not be negative, got {config.notify_min_magnitude}",
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
