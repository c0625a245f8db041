"""Sync Scheduler - Wires Functional Core and Imperative Shell.

This module coordinates refresh cycles: it fetches the three BMKG feeds
concurrently, runs the pure parsers and the change signature, asks the
notification gate, and commits the result to the snapshot store. It is
the only place that decides what a failure means for a cycle.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from gempa_sync.core.config import Config
from gempa_sync.core.errors import OptionalSourceDegraded, SyncError
from gempa_sync.core.event import EventRecord
from gempa_sync.core.feeds import Endpoint, FeedKind, build_endpoints
from gempa_sync.core.latest_parser import parse_latest_event
from gempa_sync.core.list_parser import parse_event_list
from gempa_sync.core.notification import AlertDecision, evaluate_notification
from gempa_sync.core.snapshot import Snapshot, build_snapshot
from gempa_sync.shell.alert_sink import AlertSink, AlertStatus, LoggingAlertSink
from gempa_sync.shell.source_client import SourceClient
from gempa_sync.store import SnapshotStore


logger = logging.getLogger(__name__)


class SyncPhase(str, Enum):
    """Scheduler states. There is no terminal state."""
    IDLE = "idle"
    FETCHING_FOREGROUND = "fetching_foreground"
    FETCHING_BACKGROUND = "fetching_background"


@dataclass
class CycleResult:
    """Result of one refresh cycle.

    Attributes:
        sequence: Cycle sequence number
        background: True for timer-triggered cycles
        committed: Whether a new snapshot was committed
        stale: The cycle was superseded by a newer one and discarded
        error: Latest-feed failure that stopped the cycle
        degraded: List feeds that failed and resolved to empty lists
        alert: Alert dispatched by this cycle
        alert_status: Outcome of the alert dispatch
    """
    sequence: int
    background: bool
    committed: bool = False
    stale: bool = False
    error: SyncError | None = None
    degraded: list[OptionalSourceDegraded] = field(default_factory=list)
    alert: AlertDecision | None = None
    alert_status: AlertStatus | None = None

    @property
    def success(self) -> bool:
        """Returns True if the cycle committed without a fatal error."""
        return self.committed and self.error is None

    @property
    def summary(self) -> str:
        """Human-readable summary of the cycle."""
        kind = "background" if self.background else "foreground"
        if self.stale:
            return f"Cycle {self.sequence} ({kind}) superseded"
        if self.error is not None:
            return f"Cycle {self.sequence} ({kind}) failed: {self.error}"
        degraded = ", ".join(d.endpoint.value for d in self.degraded) or "none"
        return (
            f"Cycle {self.sequence} ({kind}) committed, "
            f"degraded feeds: {degraded}, "
            f"alert: {'sent' if self.alert_status is AlertStatus.OK else 'none'}"
        )


@dataclass(frozen=True)
class SyncStatus:
    """Observable scheduler state for the presentation layer.

    Attributes:
        phase: Current scheduler state
        loading: A foreground cycle is running
        error: Failure of the last foreground cycle, cleared on refresh
        auto_update: Background refresh enabled
        online: Last reported network availability
        last_cycle: Result of the most recent finished cycle
    """
    phase: SyncPhase = SyncPhase.IDLE
    loading: bool = False
    error: SyncError | None = None
    auto_update: bool = True
    online: bool = True
    last_cycle: CycleResult | None = None


StatusListener = Callable[[SyncStatus], None]


class SyncScheduler:
    """Drives foreground and background refresh cycles.

    This class wires together:
    - Source client (fetches raw feed documents)
    - Core functions (parsing, signature, notification gate)
    - Snapshot store (the committed state)
    - Alert sink (user-facing alerts)

    Every cycle gets a sequence number. Starting a foreground cycle
    cancels the one in flight, and a cycle that is no longer the newest
    never commits.
    """

    def __init__(
        self,
        config: Config,
        source_client: SourceClient | None = None,
        alert_sink: AlertSink | None = None,
        store: SnapshotStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize scheduler with configuration.

        Args:
            config: Application configuration
            source_client: Feed client (created if not provided)
            alert_sink: Alert sink (logging sink if not provided)
            store: Snapshot store (created if not provided)
            clock: Returns the commit time (UTC now if not provided)
        """
        self.config = config
        self._owns_client = source_client is None
        self.source_client = source_client or SourceClient(
            timeout=config.request_timeout_seconds,
        )
        self.alert_sink = alert_sink or LoggingAlertSink()
        self.store = store or SnapshotStore()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._endpoints = build_endpoints(
            latest_url=config.latest_url,
            recent_url=config.recent_url,
            felt_url=config.felt_url,
        )

        self._status = SyncStatus(auto_update=config.auto_update)
        self._status_listeners: list[StatusListener] = []
        self._sequence = 0
        self._cycle_task: asyncio.Task | None = None
        self._timer_task: asyncio.Task | None = None
        self._alert_tasks: set[asyncio.Task] = set()
        self._started = False
        self._closed = False

    # Observation

    @property
    def status(self) -> SyncStatus:
        return self._status

    def snapshot(self) -> Snapshot:
        """Return the last committed snapshot."""
        return self.store.current()

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register a listener called on every status change.

        Returns:
            A function that removes the listener
        """
        self._status_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._status_listeners:
                self._status_listeners.remove(listener)

        return unsubscribe

    # Commands

    async def start(self) -> None:
        """Ask for alert permission and arm the timer if auto-update is on.

        Does not fetch; call refresh() for the first snapshot.
        """
        self._started = True

        granted = await asyncio.to_thread(self.alert_sink.request_permission)
        logger.info("Alert permission %s", "granted" if granted else "not granted")

        if self._status.auto_update:
            self._arm_timer()

    async def refresh(self) -> CycleResult:
        """Run a foreground cycle and wait for it.

        Cancels any cycle in flight. A foreground cycle clears the stored
        error, sets the loading flag and never alerts.

        Returns:
            CycleResult of this cycle (stale if a newer refresh replaced it)

        Raises:
            NetworkFailure: If the latest-event feed could not be fetched
            ParseFailure: If the latest-event document is unusable
        """
        task, result = self._start_cycle(background=False)
        return await self._await_cycle(task, result)

    async def tick(self) -> CycleResult | None:
        """Handle one timer tick and wait for its cycle.

        Returns:
            CycleResult, or None if the tick was skipped
        """
        started = self._on_tick()
        if started is None:
            return None
        task, result = started
        return await self._await_cycle(task, result)

    def set_auto_update(self, enabled: bool) -> None:
        """Enable or disable background refresh.

        Disabling cancels the pending timer. Enabling re-arms it without
        an immediate fetch; the next fetch is the next scheduled tick.
        """
        self._update_status(auto_update=enabled)

        if not self._started or self._closed:
            return

        if enabled:
            self._arm_timer()
        else:
            self._cancel_timer()

        logger.info("Auto-update %s", "enabled" if enabled else "disabled")

    def set_online(self, online: bool) -> None:
        """Record network availability.

        The timer keeps running while offline; offline ticks fail like
        any other network failure.
        """
        if online != self._status.online:
            logger.info("Network is %s", "online" if online else "offline")
        self._update_status(online=online)

    def acknowledge(self) -> Snapshot:
        """Mark the current snapshot as seen."""
        return self.store.acknowledge()

    async def close(self) -> None:
        """Stop the timer, cancel the cycle in flight and release HTTP."""
        self._closed = True
        timer_task = self._timer_task
        self._cancel_timer()

        pending = [
            t for t in (self._cycle_task, timer_task)
            if t is not None and not t.done()
        ]
        for task in pending:
            task.cancel()

        # Alerts already handed to the sink are left to finish
        pending.extend(self._alert_tasks)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        if self._owns_client:
            await self.source_client.aclose()

        logger.info("Scheduler closed")

    # Timer

    def _arm_timer(self) -> None:
        self._cancel_timer()
        self._timer_task = asyncio.create_task(self._timer_loop())

    def _cancel_timer(self) -> None:
        if self._timer_task is not None and not self._timer_task.done():
            self._timer_task.cancel()
        self._timer_task = None

    async def _timer_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.poll_interval_seconds)
            self._on_tick()

    def _on_tick(self) -> tuple[asyncio.Task, CycleResult] | None:
        if not self._status.auto_update:
            return None

        if self._cycle_task is not None and not self._cycle_task.done():
            logger.debug("Timer tick skipped, cycle %d still in flight", self._sequence)
            return None

        task, result = self._start_cycle(background=True)
        task.add_done_callback(self._on_background_done)
        return task, result

    def _on_background_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Background cycle crashed", exc_info=error)

    # Cycles

    def _start_cycle(self, background: bool) -> tuple[asyncio.Task, CycleResult]:
        if self._cycle_task is not None and not self._cycle_task.done():
            logger.info("Cancelling in-flight cycle %d", self._sequence)
            self._cycle_task.cancel()

        self._sequence += 1
        result = CycleResult(sequence=self._sequence, background=background)

        if background:
            self._update_status(phase=SyncPhase.FETCHING_BACKGROUND)
        else:
            self._update_status(
                phase=SyncPhase.FETCHING_FOREGROUND,
                loading=True,
                error=None,
            )

        self._cycle_task = asyncio.create_task(self._run_cycle(result))
        return self._cycle_task, result

    def _is_stale(self, sequence: int) -> bool:
        return sequence != self._sequence

    async def _await_cycle(self, task: asyncio.Task, result: CycleResult) -> CycleResult:
        """Wait for a cycle, turning supersession into a stale result.

        A cycle cancelled after its commit keeps its committed result.
        """
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if self._closed or (current is not None and current.cancelling()):
                raise
            if result.committed:
                logger.info("Cycle %d superseded after commit", result.sequence)
                return result
            logger.info("Cycle %d superseded by a newer refresh", result.sequence)
            result.stale = True
            return result

    async def _run_cycle(self, result: CycleResult) -> CycleResult:
        """Run one cycle: fetch, assemble, gate, commit.

        Args:
            result: Result record of this cycle, filled in as it runs

        Returns:
            CycleResult describing what happened

        Raises:
            SyncError: Latest-feed failure in a foreground cycle
        """
        sequence = result.sequence
        background = result.background
        kind = "background" if background else "foreground"
        logger.info("Starting %s cycle %d", kind, sequence)

        try:
            latest, recent, felt = await self._fetch_all(result)
        except asyncio.CancelledError:
            logger.info("Cycle %d cancelled", sequence)
            self._finish(sequence, result)
            raise
        except SyncError as e:
            if self._is_stale(sequence):
                result.stale = True
                return result

            result.error = e
            if background:
                logger.warning(
                    "Background cycle %d failed, keeping previous snapshot: %s",
                    sequence,
                    e,
                )
                self._finish(sequence, result)
                return result

            logger.error("Foreground cycle %d failed: %s", sequence, e)
            self._finish(sequence, result, error=e)
            raise
        except Exception:
            logger.exception("%s cycle %d crashed", kind.capitalize(), sequence)
            self._finish(sequence, result)
            raise

        if self._is_stale(sequence):
            logger.info("Discarding stale cycle %d", sequence)
            result.stale = True
            return result

        try:
            decision = self._commit(result, latest, recent, felt)
        except Exception:
            logger.exception("%s cycle %d crashed", kind.capitalize(), sequence)
            self._finish(sequence, result)
            raise

        self._finish(sequence, result)

        if decision is not None:
            # Shielded: superseding a committed cycle must not drop its alert
            alert_task = asyncio.create_task(self._dispatch_alert(decision, result))
            self._alert_tasks.add(alert_task)
            alert_task.add_done_callback(self._alert_tasks.discard)
            await asyncio.shield(alert_task)

        logger.info("%s", result.summary)
        return result

    def _commit(
        self,
        result: CycleResult,
        latest: EventRecord,
        recent: list[EventRecord],
        felt: list[EventRecord],
    ) -> AlertDecision | None:
        """Assemble the candidate, ask the gate and commit to the store."""
        candidate = build_snapshot(latest, recent, felt, self._clock())
        previous = self.store.current()

        decision = evaluate_notification(
            previous.signature,
            candidate.signature,
            result.background,
            latest,
            self.alert_sink.permission_granted(),
            self.config.notify_min_magnitude,
        )

        self.store.commit(candidate, result.background)
        result.committed = True
        result.alert = decision
        return decision

    async def _fetch_all(
        self,
        result: CycleResult,
    ) -> tuple[EventRecord, list[EventRecord], list[EventRecord]]:
        """Fetch and parse all three feeds concurrently.

        Waits for all three even if one fails. List failures are recorded
        on the result and resolve to empty lists.

        Raises:
            SyncError: If the latest-event feed failed
        """
        latest_outcome, recent_outcome, felt_outcome = await asyncio.gather(
            self._fetch_latest(self._endpoints[FeedKind.LATEST]),
            self._fetch_list(self._endpoints[FeedKind.RECENT]),
            self._fetch_list(self._endpoints[FeedKind.FELT]),
            return_exceptions=True,
        )

        lists = []
        for outcome in (recent_outcome, felt_outcome):
            if isinstance(outcome, BaseException):
                raise outcome
            events, degraded = outcome
            if degraded is not None:
                result.degraded.append(degraded)
            lists.append(events)

        if isinstance(latest_outcome, BaseException):
            raise latest_outcome

        return latest_outcome, lists[0], lists[1]

    async def _fetch_latest(self, endpoint: Endpoint) -> EventRecord:
        payload = await self.source_client.fetch(endpoint)
        return parse_latest_event(payload.text)

    async def _fetch_list(
        self,
        endpoint: Endpoint,
    ) -> tuple[list[EventRecord], OptionalSourceDegraded | None]:
        try:
            payload = await self.source_client.fetch(endpoint)
            events = parse_event_list(payload.text, endpoint.kind)
        except SyncError as e:
            logger.warning("%s feed degraded to an empty list: %s", endpoint.kind.value, e)
            return [], OptionalSourceDegraded.from_error(e)
        except Exception as e:
            logger.exception("%s feed crashed, degraded to an empty list", endpoint.kind.value)
            return [], OptionalSourceDegraded(
                endpoint=endpoint.kind,
                cause=str(e) or type(e).__name__,
            )

        return events, None

    async def _dispatch_alert(self, decision: AlertDecision, result: CycleResult) -> AlertStatus:
        """Send one alert through the sink without blocking the loop.

        The outcome is recorded on the cycle result.
        """
        logger.info(
            "Dispatching alert for M%s %s",
            decision.event.magnitude,
            decision.event.region,
        )

        try:
            status = await asyncio.to_thread(
                self.alert_sink.notify,
                decision.title,
                decision.body,
            )
        except Exception:
            logger.exception("Alert sink failed")
            status = AlertStatus.UNAVAILABLE

        if status is not AlertStatus.OK:
            logger.warning("Alert sink unavailable, alert not shown")

        result.alert_status = status
        return status

    # Status

    def _finish(
        self,
        sequence: int,
        result: CycleResult,
        error: SyncError | None = None,
    ) -> None:
        """Return to idle if this cycle is still the newest."""
        if self._is_stale(sequence):
            return

        changes = {
            "phase": SyncPhase.IDLE,
            "last_cycle": result,
        }
        if not result.background:
            changes["loading"] = False
            changes["error"] = error

        self._update_status(**changes)

    def _update_status(self, **changes) -> None:
        self._status = replace(self._status, **changes)
        for listener in list(self._status_listeners):
            try:
                listener(self._status)
            except Exception:
                logger.exception("Status listener failed")
