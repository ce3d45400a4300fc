"""Service for managing the book catalogue."""
import logging
from typing import Callable, Iterable, List, Optional

from sqlalchemy.orm import Session

from wordsprout.exceptions import BookNotFoundError
from wordsprout.models.models import ApprovalStatus, Book, BookSourceType
from wordsprout.services.learner_service import LearnerService
from wordsprout.services.vocabulary_service import unique_lowercase

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "title",
    "author",
    "grade_level",
    "description",
    "is_beta",
    "source_type",
    "approval_status",
)


class BookService:
    """Service for books and their word lists.

    Every change to the set of book words calls ``on_words_changed`` so the
    global word statistics can be refreshed in the background.
    """

    def __init__(self, db: Session, on_words_changed: Optional[Callable[[str], object]] = None):
        """Initialize the service with a database session and a resync trigger."""
        self.db = db
        self.on_words_changed = on_words_changed

    def _words_changed(self, reason: str) -> None:
        if self.on_words_changed is None:
            return
        try:
            self.on_words_changed(reason)
        except Exception as e:
            # The book write is already committed
            logger.error("Failed to schedule global word stats resync (%s): %s", reason, e, exc_info=True)

    def get_book(self, book_id: int) -> Book:
        """Get a book by ID or raise BookNotFoundError."""
        book = self.db.query(Book).filter(Book.id == book_id).first()
        if not book:
            raise BookNotFoundError(book_id)
        return book

    def list_books(self, preset: Optional[bool] = None, learner_id: Optional[int] = None) -> List[Book]:
        """Get books, optionally only presets/custom books or one learner's books."""
        query = self.db.query(Book)
        if preset is not None:
            query = query.filter(Book.is_preset == preset)
        if learner_id is not None:
            query = query.filter(Book.learner_id == learner_id)
        return query.order_by(Book.id).all()

    def get_book_by_title(self, title: str, learner_id: Optional[int] = None) -> Optional[Book]:
        """Find a custom book by title, ignoring case and surrounding whitespace."""
        normalized = title.strip().lower()
        query = self.db.query(Book).filter(Book.is_preset == False)  # noqa: E712
        if learner_id is not None:
            query = query.filter(Book.learner_id == learner_id)
        for book in query.order_by(Book.id).all():
            if book.title.strip().lower() == normalized:
                return book
        return None

    def create_book(
        self,
        title: str,
        words: Iterable[str] = (),
        author: Optional[str] = None,
        learner_id: Optional[int] = None,
        grade_level: Optional[str] = None,
        description: Optional[str] = None,
        source_type: str = BookSourceType.PARENT.value,
        approval_status: str = ApprovalStatus.APPROVED.value,
    ) -> Book:
        """Create a custom book."""
        if learner_id is not None:
            LearnerService(self.db).get_learner(learner_id)
        word_list = unique_lowercase(words)
        book = Book(
            title=title,
            author=author,
            learner_id=learner_id,
            grade_level=grade_level,
            description=description,
            words=word_list,
            word_count=len(word_list),
            is_preset=False,
            is_beta=False,
            source_type=BookSourceType(source_type).value,
            approval_status=ApprovalStatus(approval_status).value,
        )
        self.db.add(book)
        self.db.commit()
        logger.info("Created book %r (ID: %d) with %d words", title, book.id, len(word_list))

        self._words_changed(f"book {book.id} created")
        return book

    def create_preset_book(
        self,
        title: str,
        words: Iterable[str] = (),
        author: Optional[str] = None,
        grade_level: Optional[str] = None,
        is_beta: bool = False,
    ) -> Book:
        """Create a curated preset book.

        Presets are created in bulk at seed time, which is followed by a
        resync, so no resync is requested here.
        """
        word_list = unique_lowercase(words)
        book = Book(
            title=title,
            author=author,
            grade_level=grade_level,
            words=word_list,
            word_count=len(word_list),
            is_preset=True,
            is_beta=is_beta,
            source_type=BookSourceType.CURATED.value,
            approval_status=ApprovalStatus.APPROVED.value,
        )
        self.db.add(book)
        self.db.commit()
        return book

    def seed_preset_books(self, books: Iterable[dict]) -> int:
        """Create preset books unless presets already exist.

        Returns the number of books created.
        """
        if self.db.query(Book).filter(Book.is_preset == True).count() > 0:  # noqa: E712
            return 0
        created = 0
        for data in books:
            self.create_preset_book(
                title=data["title"],
                words=data.get("words", []),
                author=data.get("author"),
                grade_level=data.get("grade_level"),
                is_beta=data.get("is_beta", False),
            )
            created += 1
        logger.info("Seeded %d preset books", created)
        if created:
            self._words_changed("preset books seeded")
        return created

    def update_book(self, book_id: int, words: Optional[Iterable[str]] = None, **fields) -> Book:
        """Update book attributes; a new word list replaces the old one."""
        book = self.get_book(book_id)
        for key, value in fields.items():
            if key in EDITABLE_FIELDS:
                setattr(book, key, value)

        if words is not None:
            word_list = unique_lowercase(words)
            book.words = word_list
            book.word_count = len(word_list)

        self.db.commit()

        if words is not None:
            self._words_changed(f"book {book_id} updated")
        return book

    def append_words(self, book_id: int, words: Iterable[str]) -> Book:
        """Add new words to the end of a book's word list."""
        book = self.get_book(book_id)
        combined = unique_lowercase(list(book.words or []) + list(words or []))
        added = len(combined) - len(book.words or [])
        book.words = combined
        book.word_count = len(combined)
        self.db.commit()
        logger.info("Appended %d words to book %d", added, book_id)

        self._words_changed(f"words appended to book {book_id}")
        return book

    def find_or_create_by_title(self, title: str, words: Iterable[str], learner_id: int) -> Book:
        """Append words to the learner's book with this title, or create it."""
        existing = self.get_book_by_title(title, learner_id)
        if existing is not None:
            return self.append_words(existing.id, words)
        return self.create_book(title=title, words=words, learner_id=learner_id)

    def delete_book(self, book_id: int) -> None:
        """Delete a book."""
        book = self.get_book(book_id)
        self.db.delete(book)
        self.db.commit()
        logger.info("Deleted book ID: %d", book_id)

        self._words_changed(f"book {book_id} deleted")
