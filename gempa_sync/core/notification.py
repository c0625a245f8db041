"""Notification gate - Pure functions.

Decides whether a cycle should raise a user-facing alert. The gate does
no per-event de-duplication: a signature that oscillates between two
known states across polls can alert again.
"""

from dataclasses import dataclass

from gempa_sync.core.event import EventRecord, STRONG_THRESHOLD, magnitude_at_least
from gempa_sync.core.formatter import ALERT_TITLE, format_alert_body
from gempa_sync.core.signature import has_changed


@dataclass(frozen=True)
class AlertDecision:
    """An alert to dispatch.

    Attributes:
        event: The event that triggered the alert
        title: Alert title
        body: Alert body (magnitude and region)
    """
    event: EventRecord
    title: str
    body: str


def should_notify(
    previous_signature: str,
    new_signature: str,
    is_background: bool,
    candidate_latest: EventRecord | None,
    permission_granted: bool,
    min_magnitude: float = STRONG_THRESHOLD,
) -> bool:
    """Evaluate whether a cycle should alert.

    Pure function. All must hold:
    - the cycle is a background (timer) cycle
    - there is a previous signature (never on the first fetch)
    - the signature changed
    - the latest magnitude parses to at least min_magnitude
    - alert permission is granted

    Args:
        previous_signature: Signature of the stored snapshot
        new_signature: Signature of the candidate snapshot
        is_background: True for timer-triggered cycles
        candidate_latest: Latest event of the candidate snapshot
        permission_granted: Whether the alert sink may be used
        min_magnitude: Alert threshold (inclusive)

    Returns:
        True if exactly one alert should be dispatched
    """
    if not is_background:
        return False

    if not has_changed(previous_signature, new_signature):
        return False

    if candidate_latest is None:
        return False

    if not magnitude_at_least(candidate_latest.magnitude, min_magnitude):
        return False

    return permission_granted


def evaluate_notification(
    previous_signature: str,
    new_signature: str,
    is_background: bool,
    candidate_latest: EventRecord | None,
    permission_granted: bool,
    min_magnitude: float = STRONG_THRESHOLD,
) -> AlertDecision | None:
    """Build the alert for a cycle, None if the gate is closed.

    Pure function.
    """
    if candidate_latest is None or not should_notify(
        previous_signature,
        new_signature,
        is_background,
        candidate_latest,
        permission_granted,
        min_magnitude,
    ):
        return None

    return AlertDecision(
        event=candidate_latest,
        title=ALERT_TITLE,
        body=format_alert_body(candidate_latest),
    )
