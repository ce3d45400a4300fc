"""Database models for the vocabulary engine."""
from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from wordsprout.config import DEFAULT_DECK_SIZE, DEFAULT_MASTERY_THRESHOLD
from wordsprout.models.base import Base, TimestampMixin, utcnow


class WordStatus(str, Enum):
    """Mastery status of a learner's word."""
    NEW = "new"  # never practiced
    LEARNING = "learning"
    MASTERED = "mastered"


class BookSourceType(str, Enum):
    """Where a book's word list came from."""
    CURATED = "curated"
    TEACHER = "teacher"
    PARENT = "parent"
    PUBLIC_DOMAIN = "public_domain"
    COMMUNITY = "community"


class ApprovalStatus(str, Enum):
    """Moderation state of a contributed book."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Learner(Base, TimestampMixin):
    """Learner (child) profile and practice configuration."""

    __tablename__ = "learners"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    grade_level = Column(String, nullable=True)
    mastery_threshold = Column(Integer, nullable=False, default=DEFAULT_MASTERY_THRESHOLD)
    deck_size = Column(Integer, nullable=False, default=DEFAULT_DECK_SIZE)
    demote_on_miss = Column(Boolean, nullable=False, default=True)
    stop_words_enabled = Column(Boolean, nullable=False, default=False)
    grade_level_filter_enabled = Column(Boolean, nullable=False, default=False)

    # Relationships
    words = relationship("Word", back_populates="learner", cascade="all, delete-orphan")
    sessions = relationship("ReadingSession", back_populates="learner", cascade="all, delete-orphan")
    books = relationship("Book", back_populates="learner", cascade="all, delete-orphan")
    book_progress = relationship("BookProgress", back_populates="learner", cascade="all, delete-orphan")


class Word(Base):
    """A distinct word seen by a learner."""

    __tablename__ = "words"
    __table_args__ = (UniqueConstraint("learner_id", "word", name="uq_words_learner_word"),)

    id = Column(Integer, primary_key=True)
    learner_id = Column(Integer, ForeignKey("learners.id", ondelete="CASCADE"), nullable=False, index=True)
    word = Column(String, nullable=False)
    first_seen = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_seen = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    total_occurrences = Column(Integer, nullable=False, default=1)
    sessions_seen_count = Column(Integer, nullable=False, default=1)
    status = Column(String, nullable=False, default=WordStatus.NEW.value)
    mastery_correct_count = Column(Integer, nullable=False, default=0)
    incorrect_count = Column(Integer, nullable=False, default=0)
    last_tested = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    learner = relationship("Learner", back_populates="words")


class Book(Base, TimestampMixin):
    """Book with its de-duplicated lowercase word list."""

    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    learner_id = Column(Integer, ForeignKey("learners.id", ondelete="CASCADE"), nullable=True)
    title = Column(String, nullable=False)
    author = Column(String, nullable=True)
    grade_level = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    words = Column(JSON, nullable=False, default=list)
    word_count = Column(Integer, nullable=False, default=0)
    is_preset = Column(Boolean, nullable=False, default=False)
    is_beta = Column(Boolean, nullable=False, default=False)
    source_type = Column(String, nullable=False, default=BookSourceType.PARENT.value)
    approval_status = Column(String, nullable=False, default=ApprovalStatus.APPROVED.value)

    # Relationships
    learner = relationship("Learner", back_populates="books")
    progress = relationship("BookProgress", back_populates="book", cascade="all, delete-orphan")


class GlobalWordStats(Base):
    """Cross-book word statistics; derived from the books table."""

    __tablename__ = "global_word_stats"

    id = Column(Integer, primary_key=True)
    word = Column(String, nullable=False, unique=True, index=True)
    book_count = Column(Integer, nullable=False, default=0)
    total_occurrences = Column(Integer, nullable=False, default=0)
    leverage_score = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class BookProgress(Base):
    """Cached readiness snapshot for a learner and a book."""

    __tablename__ = "book_progress"
    __table_args__ = (UniqueConstraint("learner_id", "book_id", name="uq_book_progress_learner_book"),)

    id = Column(Integer, primary_key=True)
    learner_id = Column(Integer, ForeignKey("learners.id", ondelete="CASCADE"), nullable=False)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False)
    mastered_word_count = Column(Integer, nullable=False, default=0)
    total_word_count = Column(Integer, nullable=False, default=0)
    readiness_percent = Column(Integer, nullable=False, default=0)
    is_ready = Column(Boolean, nullable=False, default=False)
    last_updated = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    learner = relationship("Learner", back_populates="book_progress")
    book = relationship("Book", back_populates="progress")


class ReadingSession(Base):
    """One ingestion of photographed page text."""

    __tablename__ = "reading_sessions"

    id = Column(Integer, primary_key=True)
    learner_id = Column(Integer, ForeignKey("learners.id", ondelete="CASCADE"), nullable=False)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="SET NULL"), nullable=True)
    book_title = Column(String, nullable=True)
    extracted_text = Column(Text, nullable=True)
    cleaned_text = Column(Text, nullable=True)
    new_words_count = Column(Integer, nullable=False, default=0)
    total_words_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    learner = relationship("Learner", back_populates="sessions")
