"""
Background worker keeping the global word statistics index in sync.
Book writes enqueue a resync request and return immediately; the worker
thread recomputes the index shortly after.
"""
import logging
import threading
import time
from datetime import datetime
from typing import Optional

from wordsprout import monitoring
from wordsprout.config import settings
from wordsprout.models.base import SessionLocal, session_scope, utcnow
from wordsprout.models.engine_models import ResyncSummary
from wordsprout.services.stats_service import GlobalStatsService

logger = logging.getLogger(__name__)


class ResyncWorker:
    """
    Coalescing resync queue with at-least-once delivery.

    Every request gets a ticket number. A ticket is acknowledged only once a
    resync that started after the request completed successfully, so several
    requests arriving while a resync runs are served by one follow-up run.
    Failed resyncs are logged and retried up to ``max_attempts`` times; after
    that the index stays stale until the next request.
    """

    def __init__(
        self,
        session_factory=SessionLocal,
        retry_delay: Optional[float] = None,
        max_attempts: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.retry_delay = settings.resync.retry_delay if retry_delay is None else retry_delay
        self.max_attempts = settings.resync.max_attempts if max_attempts is None else max_attempts

        self._condition = threading.Condition()
        self._resync_lock = threading.Lock()
        self.requested = 0
        self.completed = 0
        self._attempted = 0
        self.last_synced_at: Optional[datetime] = None
        self.last_summary: Optional[ResyncSummary] = None
        self.last_error: Optional[BaseException] = None

        self.running = False
        self.thread: Optional[threading.Thread] = None

    @property
    def is_stale(self) -> bool:
        """Whether some book change is not yet reflected in the index."""
        return self.completed < self.requested

    def request(self, reason: str = "") -> int:
        """Enqueue a resync and return its ticket."""
        with self._condition:
            self.requested += 1
            ticket = self.requested
            self._condition.notify_all()
        logger.debug("[RESYNC] Requested resync #%d %s", ticket, reason)
        return ticket

    def start(self) -> None:
        """Start the background worker thread."""
        if self.running:
            return

        self.running = True
        self.thread = threading.Thread(target=self._run, name="resync-worker", daemon=True)
        self.thread.start()
        logger.info("[RESYNC] Resync worker started")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the worker thread, letting an in-flight resync finish."""
        if not self.running:
            return

        with self._condition:
            self.running = False
            self._condition.notify_all()
        if self.thread is not None:
            self.thread.join(timeout)
            self.thread = None
        logger.info("[RESYNC] Resync worker stopped")

    def wait_until_synced(self, ticket: Optional[int] = None, timeout: Optional[float] = None) -> bool:
        """Block until ``ticket`` (default: the latest request) is acknowledged."""
        with self._condition:
            target = self.requested if ticket is None else ticket
            return self._condition.wait_for(lambda: self.completed >= target, timeout)

    def run_pending(self) -> Optional[ResyncSummary]:
        """Serve outstanding requests synchronously when the thread is not used."""
        with self._condition:
            pending = self._attempted < self.requested
        if pending:
            self._process()
        return self.last_summary

    def resync_now(self) -> ResyncSummary:
        """Resync immediately in the calling thread; errors propagate."""
        with self._condition:
            target = self.requested
        with self._resync_lock:
            summary = self._resync()
        self._acknowledge(target, summary)
        return summary

    def _run(self) -> None:
        """Main worker loop."""
        while True:
            with self._condition:
                self._condition.wait_for(lambda: not self.running or self._attempted < self.requested)
                if not self.running:
                    break
            self._process()

    def _process(self) -> bool:
        with self._condition:
            target = self.requested
            self._attempted = target

        for attempt in range(1, self.max_attempts + 1):
            if self._attempt(target):
                return True
            if attempt < self.max_attempts and not self._pause():
                break

        logger.error("[RESYNC] Giving up on resync #%d after %d attempt(s)", target, attempt)
        return False

    def _pause(self) -> bool:
        """Wait before a retry; False when the worker was stopped meanwhile."""
        if threading.current_thread() is not self.thread:
            time.sleep(self.retry_delay)
            return True
        with self._condition:
            self._condition.wait_for(lambda: not self.running, self.retry_delay)
            return self.running

    def _attempt(self, target: int) -> bool:
        try:
            with self._resync_lock:
                summary = self._resync()
        except Exception as e:
            monitoring.resync_failures.inc()
            self.last_error = e
            logger.error("[RESYNC] Global word stats resync failed: %s", e, exc_info=True)
            return False
        self._acknowledge(target, summary)
        return True

    def _resync(self) -> ResyncSummary:
        with session_scope(self.session_factory) as db:
            return GlobalStatsService(db).resync()

    def _acknowledge(self, target: int, summary: ResyncSummary) -> None:
        with self._condition:
            self.completed = max(self.completed, target)
            self._attempted = max(self._attempted, target)
            self.last_synced_at = utcnow()
            self.last_summary = summary
            self.last_error = None
            self._condition.notify_all()
