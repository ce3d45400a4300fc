"""Library entry point consumed by the HTTP layer."""
import logging
from typing import Iterable, List, Optional

from wordsprout import monitoring
from wordsprout.config import settings
from wordsprout.models.base import Base, SessionLocal, session_scope
from wordsprout.models.engine_models import (
    BookReadiness,
    BookSummary,
    IngestSummary,
    LearnerConfig,
    PrioritizedWord,
    ResyncSummary,
    WordView,
)
from wordsprout.services.book_service import BookService
from wordsprout.services.learner_service import LearnerService
from wordsprout.services.readiness_service import ReadinessService
from wordsprout.services.resync_worker import ResyncWorker
from wordsprout.services.vocabulary_service import VocabularyService


class VocabularyEngine:
    """Vocabulary mastery and prioritization engine.

    Each call runs in its own database session. Book writes schedule a
    background resync of the global word statistics, so prioritization may
    briefly use scores that are one resync behind.
    """

    def __init__(self, session_factory=SessionLocal, resync_worker: Optional[ResyncWorker] = None):
        """Initialize the engine."""
        self.session_factory = session_factory
        self.resync_worker = resync_worker or ResyncWorker(session_factory)
        self.running = False
        self.logger = logging.getLogger(__name__)

    def __enter__(self) -> "VocabularyEngine":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def start(self, background: bool = True) -> None:
        """Create tables, start the resync worker and schedule the seed-time sync."""
        if self.running:
            return

        Base.metadata.create_all(bind=self.session_factory.kw["bind"])
        self.logger.info("Database initialized")

        if settings.monitoring.enabled:
            monitoring.start_monitoring(settings.monitoring.port)
            self.logger.info("Metrics server listening on port %d", settings.monitoring.port)

        if background:
            self.resync_worker.start()
        if settings.resync.sync_on_start:
            self.resync_worker.request("on startup")

        self.running = True

    def stop(self) -> None:
        """Stop the resync worker."""
        if not self.running:
            return

        self.resync_worker.stop()
        self.running = False
        self.logger.info("Engine stopped")

    def _session(self):
        return session_scope(self.session_factory)

    def _book_service(self, db) -> BookService:
        return BookService(db, on_words_changed=self.resync_worker.request)

    # Learners

    def create_learner(self, name: str, grade_level: Optional[str] = None, **overrides) -> int:
        """Create a learner and return its ID."""
        with self._session() as db:
            return LearnerService(db).create_learner(name, grade_level, **overrides).id

    def update_learner_settings(self, learner_id: int, **changes) -> LearnerConfig:
        """Update a learner's settings and return the resulting configuration."""
        with self._session() as db:
            return LearnerConfig.from_learner(LearnerService(db).update_settings(learner_id, **changes))

    def delete_learner(self, learner_id: int) -> None:
        """Delete a learner and everything they own."""
        with self._session() as db:
            owned_books = LearnerService(db).delete_learner(learner_id)
        if owned_books:
            self.resync_worker.request(f"learner {learner_id} deleted")

    def learner_words(self, learner_id: int, status: Optional[str] = None) -> List[WordView]:
        """Get a learner's words."""
        with self._session() as db:
            return [WordView.from_word(w) for w in LearnerService(db).get_words(learner_id, status)]

    # Ingestion and practice

    def ingest(self, learner_id: int, raw_text: str, book_title: Optional[str] = None) -> IngestSummary:
        """Ingest OCR text for a learner, optionally adding its words to a titled book."""
        with self._session() as db:
            service = VocabularyService(db, book_service=self._book_service(db))
            return service.ingest_text(learner_id, raw_text, book_title)

    def record_result(self, word_id: int, is_correct: bool, is_review: bool = False) -> WordView:
        """Record a flashcard or game result for a word."""
        with self._session() as db:
            return WordView.from_word(VocabularyService(db).record_result(word_id, is_correct, is_review))

    def force_master(self, word_id: int) -> WordView:
        """Mark a word mastered after a game certified it."""
        with self._session() as db:
            return WordView.from_word(VocabularyService(db).force_master(word_id))

    # Books

    def create_book(self, title: str, words: Iterable[str] = (), **fields) -> BookSummary:
        """Create a custom book."""
        with self._session() as db:
            return BookSummary.from_book(self._book_service(db).create_book(title, words, **fields))

    def update_book(self, book_id: int, words: Optional[Iterable[str]] = None, **fields) -> BookSummary:
        """Update a book."""
        with self._session() as db:
            return BookSummary.from_book(self._book_service(db).update_book(book_id, words, **fields))

    def append_words(self, book_id: int, words: Iterable[str]) -> BookSummary:
        """Append words to a book."""
        with self._session() as db:
            return BookSummary.from_book(self._book_service(db).append_words(book_id, words))

    def delete_book(self, book_id: int) -> None:
        """Delete a book."""
        with self._session() as db:
            self._book_service(db).delete_book(book_id)

    def seed_preset_books(self, books: Iterable[dict]) -> int:
        """Create preset books when none exist yet."""
        with self._session() as db:
            return self._book_service(db).seed_preset_books(books)

    # Readiness and prioritization

    def readiness(self, learner_id: int) -> List[BookReadiness]:
        """Readiness of a learner for every book."""
        with self._session() as db:
            return ReadinessService(db).readiness(learner_id)

    def prioritized_words(self, learner_id: int, book_id: int) -> List[PrioritizedWord]:
        """Unmastered words of a book ranked by leverage."""
        with self._session() as db:
            return ReadinessService(db).prioritized_words(learner_id, book_id)

    def practice_deck(self, learner_id: int, book_id: int) -> List[PrioritizedWord]:
        """Prioritized words capped to the learner's deck size."""
        with self._session() as db:
            return ReadinessService(db).practice_deck(learner_id, book_id)

    def resync_global_stats(self) -> ResyncSummary:
        """Recompute the global word statistics now."""
        return self.resync_worker.resync_now()
