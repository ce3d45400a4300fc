"""Engine-specific exception classes."""
from typing import Optional


class WordSproutError(Exception):
    """Base exception class for vocabulary engine errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__


class NotFoundError(WordSproutError, ValueError):
    """Raised when an identity lookup finds nothing."""

    entity = "Entity"

    def __init__(self, entity_id):
        super().__init__(f"{self.entity} {entity_id} not found", error_code="NOT_FOUND")
        self.entity_id = entity_id


class LearnerNotFoundError(NotFoundError):
    """Raised when a learner cannot be found."""

    entity = "Learner"


class BookNotFoundError(NotFoundError):
    """Raised when a book cannot be found."""

    entity = "Book"


class WordNotFoundError(NotFoundError):
    """Raised when a learner word cannot be found."""

    entity = "Word"
