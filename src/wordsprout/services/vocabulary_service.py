"""Service for managing learners' vocabulary and recording practice results."""
import logging
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wordsprout import monitoring
from wordsprout.config import settings
from wordsprout.exceptions import WordNotFoundError
from wordsprout.models.base import utcnow
from wordsprout.models.engine_models import IngestResult, IngestSummary, LearnerConfig, WordState
from wordsprout.models.models import ReadingSession, Word, WordStatus
from wordsprout.services import mastery
from wordsprout.services.learner_service import LearnerService
from wordsprout.text.normalizer import TextNormalizer, cleaning_stats, top_repeated_words

logger = logging.getLogger(__name__)


def unique_lowercase(words: Iterable[str]) -> List[str]:
    """Trim, lower-case and de-duplicate words, keeping first-appearance order."""
    seen: Dict[str, None] = {}
    for word in words or []:
        if not isinstance(word, str):
            continue
        lower = word.strip().lower()
        if lower:
            seen.setdefault(lower, None)
    return list(seen)


class VocabularyService:
    """Service for the per-learner word store and the mastery state machine."""

    def __init__(self, db: Session, book_service=None):
        """Initialize the service with a database session.

        ``book_service`` is used to attach ingested words to a titled book.
        """
        self.db = db
        self.learners = LearnerService(db)
        self.book_service = book_service

    def get_word(self, word_id: int) -> Word:
        """Get a word by its ID or raise WordNotFoundError."""
        word = self.db.query(Word).filter(Word.id == word_id).first()
        if not word:
            raise WordNotFoundError(word_id)
        return word

    def get_word_by_text(self, learner_id: int, text: str) -> Optional[Word]:
        """Get a learner's word by its text, case-insensitively."""
        return (
            self.db.query(Word)
            .filter(Word.learner_id == learner_id, Word.word == text.strip().lower())
            .first()
        )

    def get_mastered_words(self, learner_id: int) -> Set[str]:
        """Get the set of words a learner has mastered."""
        rows = (
            self.db.query(Word.word)
            .filter(Word.learner_id == learner_id, Word.status == WordStatus.MASTERED.value)
            .all()
        )
        return {row.word.lower() for row in rows}

    def _existing_words(self, learner_id: int, words: List[str]) -> Dict[str, Word]:
        rows = self.db.query(Word).filter(Word.learner_id == learner_id, Word.word.in_(words)).all()
        return {row.word: row for row in rows}

    @staticmethod
    def _mark_seen(word: Word, now) -> None:
        word.total_occurrences += 1
        word.sessions_seen_count += 1
        word.last_seen = now

    def ingest(self, learner_id: int, candidate_words: Iterable[str]) -> IngestResult:
        """Add candidate words to a learner's vocabulary.

        Unknown words are created as ``new``; known words get their occurrence
        and session counters incremented while their status is left alone.
        A word inserted concurrently by another request is updated instead.
        """
        self.learners.get_learner(learner_id)
        words = unique_lowercase(candidate_words)
        if not words:
            return IngestResult()

        existing = self._existing_words(learner_id, words)
        now = utcnow()
        new_words = []

        for text in words:
            word = existing.get(text)
            if word is not None:
                self._mark_seen(word, now)
                continue

            try:
                with self.db.begin_nested():
                    self.db.add(Word(
                        learner_id=learner_id,
                        word=text,
                        first_seen=now,
                        last_seen=now,
                        status=WordStatus.NEW.value,
                        total_occurrences=1,
                        sessions_seen_count=1,
                        mastery_correct_count=0,
                        incorrect_count=0,
                    ))
                new_words.append(text)
            except IntegrityError:
                logger.info("Word %r already exists for learner %d, updating instead", text, learner_id)
                word = self.get_word_by_text(learner_id, text)
                self._mark_seen(word, now)

        self.db.commit()

        monitoring.words_ingested.inc(len(words))
        monitoring.new_words.inc(len(new_words))
        logger.info(
            "Ingested %d words for learner %d (%d new)",
            len(words),
            learner_id,
            len(new_words),
        )
        return IngestResult(new_words=new_words, total_words=len(words))

    def ingest_text(
        self,
        learner_id: int,
        raw_text: str,
        book_title: Optional[str] = None,
    ) -> IngestSummary:
        """Normalize page text, ingest its words and record a reading session."""
        learner = self.learners.get_learner(learner_id)
        config = LearnerConfig.from_learner(learner)

        processed = TextNormalizer.for_learner(config).normalize(raw_text)
        result = self.ingest(learner_id, processed.candidate_words)

        book_id = None
        title = book_title.strip() if isinstance(book_title, str) else None
        if title and processed.candidate_words and self.book_service is not None:
            book = self.book_service.find_or_create_by_title(title, processed.candidate_words, learner_id)
            book_id = book.id

        session = ReadingSession(
            learner_id=learner_id,
            book_id=book_id,
            book_title=title or None,
            extracted_text=raw_text if isinstance(raw_text, str) else None,
            cleaned_text=processed.cleaned_text,
            new_words_count=len(result.new_words),
            total_words_count=result.total_words,
        )
        self.db.add(session)
        self.db.commit()
        monitoring.reading_sessions.inc()

        return IngestSummary(
            new_words_count=len(result.new_words),
            total_words_count=result.total_words,
            top_repeated_words=top_repeated_words(processed.word_frequencies, settings.normalizer.top_words_limit),
            new_words=result.new_words,
            session_id=session.id,
            book_id=book_id,
            cleaning_stats=cleaning_stats(raw_text if isinstance(raw_text, str) else "", processed.cleaned_text),
        )

    def get_reading_sessions(self, learner_id: int) -> List[ReadingSession]:
        """Get a learner's reading sessions, newest first."""
        self.learners.get_learner(learner_id)
        return (
            self.db.query(ReadingSession)
            .filter(ReadingSession.learner_id == learner_id)
            .order_by(ReadingSession.created_at.desc(), ReadingSession.id.desc())
            .all()
        )

    def _apply_state(self, word: Word, state: WordState) -> None:
        if state.status != word.status:
            monitoring.status_transitions.labels(from_status=word.status, to_status=state.status).inc()
            logger.info(
                "Word %r (ID: %d) for learner %d: %s -> %s",
                word.word,
                word.id,
                word.learner_id,
                word.status,
                state.status,
            )
        word.status = state.status
        word.mastery_correct_count = state.mastery_correct_count
        word.incorrect_count = state.incorrect_count
        word.last_tested = state.last_tested
        self.db.commit()

    def record_result(self, word_id: int, is_correct: bool, is_review: bool = False) -> Word:
        """Record a practice result for a word and apply the mastery transition."""
        word = self.get_word(word_id)
        config = LearnerConfig.from_learner(self.learners.get_learner(word.learner_id))

        state = mastery.apply_result(WordState.from_word(word), bool(is_correct), config, is_review=bool(is_review))
        monitoring.practice_results.labels(outcome="correct" if is_correct else "incorrect").inc()
        self._apply_state(word, state)
        return word

    def force_master(self, word_id: int) -> Word:
        """Mark a word as mastered regardless of its practice history."""
        word = self.get_word(word_id)
        config = LearnerConfig.from_learner(self.learners.get_learner(word.learner_id))

        state = mastery.apply_force_master(WordState.from_word(word), config)
        self._apply_state(word, state)
        return word
