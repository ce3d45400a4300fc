"""Tests for the background resync worker."""
import pytest
from sqlalchemy.orm import Session

from wordsprout.models.engine_models import ResyncSummary
from wordsprout.services.resync_worker import ResyncWorker
from wordsprout.services.stats_service import GlobalStatsService


@pytest.fixture
def worker():
    """Create a resync worker without retry delays."""
    worker = ResyncWorker(retry_delay=0, max_attempts=3)
    yield worker
    worker.stop()


def test_run_pending_serves_requests(db: Session, worker: ResyncWorker, make_book):
    """Test queued requests run synchronously without the thread."""
    make_book(["cat", "dog"])
    ticket = worker.request("book created")
    assert worker.is_stale

    summary = worker.run_pending()

    assert summary.total == 2
    assert worker.completed == ticket
    assert not worker.is_stale
    assert worker.last_synced_at is not None
    assert GlobalStatsService(db).get_stats("cat") is not None


def test_requests_are_coalesced(worker: ResyncWorker, mocker):
    """Test several pending requests are served by one resync."""
    resync = mocker.patch.object(worker, "_resync", return_value=ResyncSummary(total=1))
    for _ in range(3):
        worker.request()

    worker.run_pending()
    worker.run_pending()

    assert resync.call_count == 1
    assert worker.completed == 3


def test_failed_resync_is_retried(worker: ResyncWorker, mocker):
    """Test a failed resync is retried and the next success acknowledges it."""
    resync = mocker.patch.object(
        worker,
        "_resync",
        side_effect=[RuntimeError("database is locked"), ResyncSummary(total=5)],
    )
    worker.request()

    summary = worker.run_pending()

    assert resync.call_count == 2
    assert summary.total == 5
    assert not worker.is_stale
    assert worker.last_error is None


def test_worker_gives_up_after_max_attempts(worker: ResyncWorker, mocker):
    """Test the index stays stale after exhausting retries until the next request."""
    resync = mocker.patch.object(worker, "_resync", side_effect=RuntimeError("boom"))
    worker.request()

    worker.run_pending()

    assert resync.call_count == 3
    assert worker.is_stale
    assert isinstance(worker.last_error, RuntimeError)

    # No new request, nothing to do
    worker.run_pending()
    assert resync.call_count == 3

    resync.side_effect = None
    resync.return_value = ResyncSummary()
    worker.request()
    worker.run_pending()
    assert not worker.is_stale


def test_resync_now_propagates_errors(worker: ResyncWorker, mocker):
    """Test an explicit resync surfaces failures to the caller."""
    mocker.patch.object(worker, "_resync", side_effect=RuntimeError("boom"))
    with pytest.raises(RuntimeError):
        worker.resync_now()


def test_resync_now_acknowledges_pending_requests(worker: ResyncWorker, make_book):
    """Test an explicit resync acknowledges requests made before it."""
    make_book(["sun"])
    worker.request()

    summary = worker.resync_now()

    assert summary.inserted == 1
    assert not worker.is_stale


def test_wait_until_synced_times_out_without_worker(worker: ResyncWorker):
    """Test waiting returns False when nothing serves the request."""
    ticket = worker.request()
    assert worker.wait_until_synced(ticket, timeout=0.05) is False


def test_background_thread_serves_requests(db: Session, worker: ResyncWorker, make_book):
    """Test the worker thread resyncs after a request."""
    worker.start()
    assert worker.running
    make_book(["cat", "dog", "sun"])

    ticket = worker.request("book created")

    assert worker.wait_until_synced(ticket, timeout=5)
    assert GlobalStatsService(db).get_stats("sun").book_count == 1

    worker.stop()
    assert not worker.running
    assert worker.thread is None
