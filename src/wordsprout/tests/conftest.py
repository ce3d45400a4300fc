"""Test configuration."""
import os
from typing import Callable, Generator, Iterable, Optional

import pytest

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///wordsprout_test.db"
os.environ["METRICS_ENABLED"] = "false"
os.environ.setdefault("RESYNC_RETRY_DELAY", "0")

# Import after environment setup
from faker import Faker  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from wordsprout.models import models  # noqa: E402,F401
from wordsprout.models.base import Base, SessionLocal, engine, init_db  # noqa: E402
from wordsprout.models.models import Book, Learner  # noqa: E402
from wordsprout.services.book_service import BookService  # noqa: E402
from wordsprout.services.learner_service import LearnerService  # noqa: E402

fake = Faker()


@pytest.fixture(autouse=True)
def setup_database():
    """Drop and recreate all tables before each test."""
    engine.dispose()
    Base.metadata.drop_all(bind=engine)
    init_db()

    yield

    engine.dispose()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def learner(db: Session) -> Learner:
    """Create a test learner with a mastery threshold of 3."""
    return LearnerService(db).create_learner(fake.first_name(), grade_level="1", mastery_threshold=3)


@pytest.fixture
def make_book(db: Session) -> Callable[..., Book]:
    """Factory creating books without scheduling a resync."""
    service = BookService(db)

    def _make_book(words: Iterable[str], title: Optional[str] = None, **fields) -> Book:
        return service.create_book(title or fake.sentence(nb_words=3), words, **fields)

    return _make_book
