"""Value objects returned by the vocabulary engine."""
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional

from wordsprout.config import DEFAULT_DECK_SIZE, DEFAULT_MASTERY_THRESHOLD
from wordsprout.models.models import Book, Learner, Word


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        # SQLite returns stored UTC timestamps without tzinfo
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    return value


class Serializable:
    """Mixin for dataclasses that are JSON-serialized by the HTTP layer."""

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(asdict(self))


@dataclass(frozen=True)
class LearnerConfig(Serializable):
    """Learner-scoped practice configuration."""
    mastery_threshold: int = DEFAULT_MASTERY_THRESHOLD
    deck_size: int = DEFAULT_DECK_SIZE
    demote_on_miss: bool = True
    stop_words_enabled: bool = False
    grade_level_filter_enabled: bool = False

    @classmethod
    def from_learner(cls, learner: Learner) -> "LearnerConfig":
        return cls(
            mastery_threshold=learner.mastery_threshold,
            deck_size=learner.deck_size,
            demote_on_miss=learner.demote_on_miss,
            stop_words_enabled=learner.stop_words_enabled,
            grade_level_filter_enabled=learner.grade_level_filter_enabled,
        )


@dataclass(frozen=True)
class WordState:
    """Mastery-relevant fields of a word, input and output of the state machine."""
    status: str
    mastery_correct_count: int = 0
    incorrect_count: int = 0
    last_tested: Optional[datetime] = None

    @classmethod
    def from_word(cls, word: Word) -> "WordState":
        return cls(
            status=word.status,
            mastery_correct_count=word.mastery_correct_count,
            incorrect_count=word.incorrect_count,
            last_tested=word.last_tested,
        )


@dataclass
class WordView(Serializable):
    """Detached snapshot of a learner's word."""
    id: int
    learner_id: int
    word: str
    status: str
    first_seen: Optional[datetime]
    last_seen: Optional[datetime]
    total_occurrences: int
    sessions_seen_count: int
    mastery_correct_count: int
    incorrect_count: int
    last_tested: Optional[datetime]

    @classmethod
    def from_word(cls, word: Word) -> "WordView":
        return cls(
            id=word.id,
            learner_id=word.learner_id,
            word=word.word,
            status=word.status,
            first_seen=word.first_seen,
            last_seen=word.last_seen,
            total_occurrences=word.total_occurrences,
            sessions_seen_count=word.sessions_seen_count,
            mastery_correct_count=word.mastery_correct_count,
            incorrect_count=word.incorrect_count,
            last_tested=word.last_tested,
        )


@dataclass
class NormalizedText(Serializable):
    """Output of the text normalizer."""
    cleaned_text: str = ""
    candidate_words: List[str] = field(default_factory=list)
    word_frequencies: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class RepeatedWord(Serializable):
    """A frequently repeated word in an ingested text."""
    word: str
    count: int


@dataclass(frozen=True)
class CleaningStats(Serializable):
    """How much of the raw text survived cleaning."""
    raw_word_count: int
    cleaned_word_count: int
    percentage_kept: int


@dataclass
class IngestResult(Serializable):
    """Result of upserting candidate words into a learner's vocabulary."""
    new_words: List[str] = field(default_factory=list)
    total_words: int = 0


@dataclass
class IngestSummary(Serializable):
    """Result of ingesting raw page text for a learner."""
    new_words_count: int
    total_words_count: int
    top_repeated_words: List[RepeatedWord]
    new_words: List[str]
    session_id: Optional[int] = None
    book_id: Optional[int] = None
    cleaning_stats: Optional[CleaningStats] = None


@dataclass
class BookSummary(Serializable):
    """Detached snapshot of a book."""
    id: int
    title: str
    author: Optional[str]
    learner_id: Optional[int]
    word_count: int
    is_preset: bool
    is_beta: bool
    source_type: str
    approval_status: str
    words: List[str] = field(default_factory=list)

    @classmethod
    def from_book(cls, book: Book) -> "BookSummary":
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            learner_id=book.learner_id,
            word_count=book.word_count,
            is_preset=book.is_preset,
            is_beta=book.is_beta,
            source_type=book.source_type,
            approval_status=book.approval_status,
            words=list(book.words or []),
        )


@dataclass
class BookReadiness(Serializable):
    """How much of a book's vocabulary a learner has mastered."""
    book: BookSummary
    mastered_count: int
    total_count: int
    percent: int
    is_ready: bool


@dataclass(frozen=True)
class PrioritizedWord(Serializable):
    """An unmastered book word ranked by instructional leverage."""
    word: str
    leverage_score: int = 0
    book_count: int = 1
    total_occurrences: int = 1


@dataclass(frozen=True)
class ResyncSummary(Serializable):
    """Outcome of a global word statistics recompute."""
    inserted: int = 0
    updated: int = 0
    deleted: int = 0
    total: int = 0
