"""Book readiness and word prioritization for learners."""
import logging
from typing import List, Optional, Set

from sqlalchemy.orm import Session

from wordsprout import monitoring
from wordsprout.config import settings
from wordsprout.models.base import utcnow
from wordsprout.models.engine_models import BookReadiness, BookSummary, PrioritizedWord
from wordsprout.models.models import Book, BookProgress
from wordsprout.services.book_service import BookService
from wordsprout.services.learner_service import LearnerService
from wordsprout.services.stats_service import GlobalStatsService
from wordsprout.services.vocabulary_service import VocabularyService, unique_lowercase

logger = logging.getLogger(__name__)


def readiness_percent(mastered_count: int, total_count: int) -> int:
    """Rounded percentage of mastered words; 0 for an empty book."""
    if total_count <= 0:
        return 0
    return round(mastered_count / total_count * 100)


class ReadinessService:
    """Service computing how ready a learner is for each book and what to practice next."""

    def __init__(self, db: Session, threshold: Optional[int] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.threshold = settings.readiness.threshold if threshold is None else threshold
        self.learners = LearnerService(db)
        self.books = BookService(db)
        self.vocabulary = VocabularyService(db)
        self.stats = GlobalStatsService(db)

    def _book_readiness(self, book: Book, mastered: Set[str]) -> BookReadiness:
        words = unique_lowercase(book.words or [])
        mastered_count = sum(1 for word in words if word in mastered)
        percent = readiness_percent(mastered_count, len(words))
        return BookReadiness(
            book=BookSummary.from_book(book),
            mastered_count=mastered_count,
            total_count=len(words),
            percent=percent,
            is_ready=percent >= self.threshold,
        )

    def readiness(self, learner_id: int) -> List[BookReadiness]:
        """Readiness for every book, most ready first."""
        self.learners.get_learner(learner_id)
        mastered = self.vocabulary.get_mastered_words(learner_id)
        results = [self._book_readiness(book, mastered) for book in self.books.list_books()]
        results.sort(key=lambda r: r.percent, reverse=True)
        return results

    def book_readiness(self, learner_id: int, book_id: int) -> BookReadiness:
        """Readiness for a single book."""
        self.learners.get_learner(learner_id)
        book = self.books.get_book(book_id)
        return self._book_readiness(book, self.vocabulary.get_mastered_words(learner_id))

    def update_book_progress(self, learner_id: int, book_id: int) -> BookProgress:
        """Store a snapshot of the learner's readiness for a book."""
        current = self.book_readiness(learner_id, book_id)
        progress = (
            self.db.query(BookProgress)
            .filter(BookProgress.learner_id == learner_id, BookProgress.book_id == book_id)
            .first()
        )
        if progress is None:
            progress = BookProgress(learner_id=learner_id, book_id=book_id)
            self.db.add(progress)

        progress.mastered_word_count = current.mastered_count
        progress.total_word_count = current.total_count
        progress.readiness_percent = current.percent
        progress.is_ready = current.is_ready
        progress.last_updated = utcnow()
        self.db.commit()
        return progress

    def prioritized_words(self, learner_id: int, book_id: int, limit: Optional[int] = None) -> List[PrioritizedWord]:
        """Rank a book's unmastered words by leverage score.

        Words without statistics (e.g. before the next resync) default to a
        zero score. Equal scores are ordered alphabetically. An empty list
        means the learner has mastered the whole book.
        """
        self.learners.get_learner(learner_id)
        book = self.books.get_book(book_id)
        monitoring.prioritization_requests.inc()

        mastered = self.vocabulary.get_mastered_words(learner_id)
        remaining = [word for word in unique_lowercase(book.words or []) if word not in mastered]
        if not remaining:
            return []

        stats = self.stats.get_stats_for_words(remaining)
        ranked = []
        for word in remaining:
            entry = stats.get(word)
            if entry is None:
                ranked.append(PrioritizedWord(word=word))
            else:
                ranked.append(PrioritizedWord(
                    word=word,
                    leverage_score=entry.leverage_score,
                    book_count=entry.book_count,
                    total_occurrences=entry.total_occurrences,
                ))

        ranked.sort(key=lambda p: (-p.leverage_score, p.word))
        if limit is not None:
            ranked = ranked[:limit]
        return ranked

    def practice_deck(self, learner_id: int, book_id: int) -> List[PrioritizedWord]:
        """Top prioritized words capped to the learner's deck size."""
        deck_size = self.learners.get_learner(learner_id).deck_size
        return self.prioritized_words(learner_id, book_id, limit=deck_size)
