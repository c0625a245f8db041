"""Engine Entry Point.

Runs the synchronization engine headless: loads configuration, builds
the scheduler and keeps it running until interrupted. A presentation
layer embeds SyncScheduler directly instead of using this module.
"""

import asyncio
import logging
import os

from gempa_sync.core.config import Config, validate_config
from gempa_sync.core.errors import SyncError
from gempa_sync.core.event import resolve_shakemap_url
from gempa_sync.core.formatter import format_event_summary
from gempa_sync.core.snapshot import Snapshot
from gempa_sync.scheduler import SyncScheduler
from gempa_sync.shell.alert_sink import create_alert_sink
from gempa_sync.shell.config_loader import load_config, load_config_from_env
from gempa_sync.store import SnapshotListener


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif any(name.startswith("GEMPA_") for name in os.environ):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


def _log_snapshot(config: Config) -> SnapshotListener:
    def listener(snapshot: Snapshot) -> None:
        if snapshot.latest is None:
            return
        logger.info("Latest: %s", format_event_summary(snapshot.latest))
        shakemap = resolve_shakemap_url(
            snapshot.latest.shakemap_ref,
            config.shakemap_base_url,
        )
        if shakemap:
            logger.info("Shakemap: %s", shakemap)
    return listener


async def run(config: Config) -> None:
    """Run the engine until cancelled.

    Args:
        config: Application configuration
    """
    scheduler = SyncScheduler(
        config,
        alert_sink=create_alert_sink(config.alert_sink, config.slack_webhook_url),
    )
    scheduler.store.subscribe(_log_snapshot(config))

    await scheduler.start()
    try:
        try:
            result = await scheduler.refresh()
            logger.info("Initial refresh: %s", result.summary)
        except SyncError as e:
            logger.error("Initial refresh failed: %s", e)

        # Background cycles run on the scheduler's timer
        await asyncio.Event().wait()
    finally:
        await scheduler.close()


def main() -> int:
    """Load and validate configuration, then run the engine."""
    config = _get_config()

    validation = validate_config(config)
    for warning in validation.warnings:
        logger.warning("Config %s: %s", warning.field, warning.message)
    if not validation.valid:
        for error in validation.critical_errors:
            logger.error("Config %s: %s", error.field, error.message)
        return 1

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
