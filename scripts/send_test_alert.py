#!/usr/bin/env python3
"""Send a test alert through the configured alert sink.

⚠️  WARNING: With the Slack sink this posts to a REAL channel!

This script creates a synthetic strong earthquake and sends it through the
configured sink using the same formatting as production alerts. A [TEST]
marker is added to the title.

Usage:
    # Dry run (preview only, no sends)
    python scripts/send_test_alert.py --dry-run

    # Send with a custom event
    python scripts/send_test_alert.py --magnitude 6.8 --region "Laut Maluku"

Environment:
    CONFIG_PATH: Path to config file (default: config/config.yaml)
    SLACK_WEBHOOK_URL: Webhook used when the sink is 'slack'
"""

import argparse
import logging
import os
import sys
from datetime import datetime, timezone

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gempa_sync.core.event import EventRecord
from gempa_sync.core.formatter import ALERT_TITLE, format_alert_body, format_event_summary
from gempa_sync.shell.alert_sink import AlertStatus, create_alert_sink
from gempa_sync.shell.config_loader import load_config

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def create_test_event(
    magnitude: float = 6.2,
    region: str = "Pusat gempa berada di laut 85 km BaratDaya Kab. Maluku Tengah",
) -> EventRecord:
    """Create a synthetic test event.

    Args:
        magnitude: Event magnitude
        region: Region description

    Returns:
        Synthetic EventRecord
    """
    now = datetime.now(timezone.utc)
    return EventRecord(
        date_local=now.strftime("%d %b %Y"),
        time_local=now.strftime("%H:%M:%S") + " WIB",
        timestamp_utc=now.isoformat(),
        coordinates="-3.52,128.28",
        magnitude=f"{magnitude:.1f}",
        depth="10 km",
        region=region,
        tsunami_potential="Tidak berpotensi tsunami",
    )


def main():
    parser = argparse.ArgumentParser(
        description="Send a test alert through the configured sink",
        epilog="⚠️  WARNING: This sends REAL notifications! Use --dry-run first.",
    )
    parser.add_argument(
        "--magnitude",
        type=float,
        default=6.2,
        help="Earthquake magnitude for test (default: 6.2)",
    )
    parser.add_argument(
        "--region",
        type=str,
        default="Pusat gempa berada di laut 85 km BaratDaya Kab. Maluku Tengah",
        help="Region description",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print what would be sent without actually sending",
    )
    args = parser.parse_args()

    config = load_config()

    event = create_test_event(magnitude=args.magnitude, region=args.region)
    title = f"[TEST] {ALERT_TITLE}"
    body = format_alert_body(event)

    logger.info("")
    logger.info("Test Event Details:")
    logger.info("  %s", format_event_summary(event))
    logger.info("  Alert sink: %s", config.alert_sink)
    logger.info("")

    if args.dry_run:
        logger.info("DRY RUN - Would send:")
        logger.info("  Title: %s", title)
        logger.info("  Body: %s", body)
        return 0

    sink = create_alert_sink(config.alert_sink, config.slack_webhook_url)

    if not sink.request_permission():
        logger.error("Alert sink '%s' has no permission to alert", config.alert_sink)
        return 1

    status = sink.notify(title, body)

    if status is AlertStatus.OK:
        logger.info("✓ Test alert sent")
        return 0

    logger.error("✗ Test alert not delivered (%s)", status.value)
    return 1


if __name__ == "__main__":
    sys.exit(main())
