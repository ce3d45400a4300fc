"""Global word statistics index used to rank words by leverage."""
import logging
import math
import time
from collections import Counter
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from wordsprout import monitoring
from wordsprout.config import LEVERAGE_SCALE
from wordsprout.models.base import utcnow
from wordsprout.models.engine_models import ResyncSummary
from wordsprout.models.models import Book, GlobalWordStats

logger = logging.getLogger(__name__)


def leverage_score(book_count: int, total_occurrences: int) -> int:
    """Leverage rewards words that recur across many books.

    ``round(book_count * ln(1 + total_occurrences) * 1000)``, scaled to an
    integer for storage.
    """
    return round(book_count * math.log(1 + total_occurrences) * LEVERAGE_SCALE)


def compute_word_stats(book_word_lists: Iterable[Iterable[str]]) -> Dict[str, Dict[str, int]]:
    """Aggregate per-word book counts and occurrences over word lists.

    A word is counted once per book for ``book_count`` and once per
    occurrence in that book for ``total_occurrences``.
    """
    stats: Dict[str, Dict[str, int]] = {}
    for words in book_word_lists:
        occurrences = Counter(w.strip().lower() for w in words or [] if isinstance(w, str) and w.strip())
        for word, count in occurrences.items():
            entry = stats.setdefault(word, {"book_count": 0, "total_occurrences": 0})
            entry["book_count"] += 1
            entry["total_occurrences"] += count
    return stats


class GlobalStatsService:
    """Derived cross-book statistics, always recomputed from the books table."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def resync(self) -> ResyncSummary:
        """Recompute every word's statistics from all books.

        Rows are inserted for new words, updated for existing ones and
        deleted for words that no longer appear in any book. The whole
        recompute is committed at once.
        """
        started = time.perf_counter()
        monitoring.resync_runs.inc()

        word_lists = [words for (words,) in self.db.query(Book.words).all()]
        stats = compute_word_stats(word_lists)

        existing = {row.word: row for row in self.db.query(GlobalWordStats).all()}
        now = utcnow()
        inserted = updated = deleted = 0

        for word, entry in stats.items():
            score = leverage_score(entry["book_count"], entry["total_occurrences"])
            row = existing.get(word)
            if row is None:
                self.db.add(GlobalWordStats(
                    word=word,
                    book_count=entry["book_count"],
                    total_occurrences=entry["total_occurrences"],
                    leverage_score=score,
                    last_updated=now,
                ))
                inserted += 1
            else:
                row.book_count = entry["book_count"]
                row.total_occurrences = entry["total_occurrences"]
                row.leverage_score = score
                row.last_updated = now
                updated += 1

        for word, row in existing.items():
            if word not in stats:
                self.db.delete(row)
                deleted += 1

        self.db.commit()

        elapsed = time.perf_counter() - started
        monitoring.resync_duration.observe(elapsed)
        logger.info(
            "Global word stats resynced in %.3fs: %d words (%d inserted, %d updated, %d deleted)",
            elapsed,
            len(stats),
            inserted,
            updated,
            deleted,
        )
        return ResyncSummary(inserted=inserted, updated=updated, deleted=deleted, total=len(stats))

    def get_stats(self, word: str) -> Optional[GlobalWordStats]:
        """Get statistics for one word."""
        return self.db.query(GlobalWordStats).filter(GlobalWordStats.word == word.strip().lower()).first()

    def get_all_stats(self) -> List[GlobalWordStats]:
        """Get all statistics, highest leverage first."""
        return (
            self.db.query(GlobalWordStats)
            .order_by(GlobalWordStats.leverage_score.desc(), GlobalWordStats.word)
            .all()
        )

    def get_stats_for_words(self, words: Iterable[str]) -> Dict[str, GlobalWordStats]:
        """Get statistics for several words keyed by word; missing words are absent."""
        words = list(words)
        if not words:
            return {}
        rows = self.db.query(GlobalWordStats).filter(GlobalWordStats.word.in_(words)).all()
        return {row.word: row for row in rows}
