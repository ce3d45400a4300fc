"""Learner service for managing learner profiles and practice settings."""
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from wordsprout.config import settings
from wordsprout.exceptions import LearnerNotFoundError
from wordsprout.models.engine_models import LearnerConfig
from wordsprout.models.models import Learner, Word, WordStatus

logger = logging.getLogger(__name__)

SETTING_FIELDS = (
    "name",
    "grade_level",
    "mastery_threshold",
    "deck_size",
    "demote_on_miss",
    "stop_words_enabled",
    "grade_level_filter_enabled",
)


class LearnerService:
    """Service for managing learner profiles and preferences."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def get_learner(self, learner_id: int) -> Learner:
        """Get a learner by ID or raise LearnerNotFoundError."""
        learner = self.db.query(Learner).filter(Learner.id == learner_id).first()
        if not learner:
            raise LearnerNotFoundError(learner_id)
        return learner

    def list_learners(self) -> List[Learner]:
        """Get all learners."""
        return self.db.query(Learner).order_by(Learner.id).all()

    def create_learner(self, name: str, grade_level: Optional[str] = None, **overrides) -> Learner:
        """Create a learner with defaults from settings."""
        values = {
            "mastery_threshold": settings.mastery.mastery_threshold,
            "deck_size": settings.mastery.deck_size,
            "demote_on_miss": settings.mastery.demote_on_miss,
            "stop_words_enabled": settings.mastery.stop_words_enabled,
            "grade_level_filter_enabled": settings.mastery.grade_level_filter_enabled,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        self._validate(values)

        learner = Learner(name=name, grade_level=grade_level, **values)
        self.db.add(learner)
        self.db.commit()
        logger.info("Created learner %s (ID: %d)", name, learner.id)
        return learner

    def update_settings(self, learner_id: int, **changes) -> Learner:
        """Update learner settings; unknown or None values are ignored."""
        learner = self.get_learner(learner_id)
        updates = {k: v for k, v in changes.items() if k in SETTING_FIELDS and v is not None}
        self._validate(updates)

        for key, value in updates.items():
            setattr(learner, key, value)
        self.db.commit()

        if updates:
            logger.info(
                "Learner settings updated (ID: %d): [%s]",
                learner_id,
                ", ".join(f"{k}: {v}" for k, v in updates.items()),
            )
        return learner

    def delete_learner(self, learner_id: int) -> bool:
        """Delete a learner with their words, sessions and custom books.

        Returns True when the learner owned books, in which case global word
        statistics need a resync.
        """
        learner = self.get_learner(learner_id)
        owned_books = bool(learner.books)
        self.db.delete(learner)
        self.db.commit()
        logger.info("Deleted learner ID: %d", learner_id)
        return owned_books

    def get_config(self, learner_id: int) -> LearnerConfig:
        """Get the learner's practice configuration."""
        return LearnerConfig.from_learner(self.get_learner(learner_id))

    def get_words(
        self,
        learner_id: int,
        status: Optional[WordStatus] = None,
        limit: Optional[int] = None,
    ) -> List[Word]:
        """Get a learner's words, most recently first seen first."""
        self.get_learner(learner_id)
        query = self.db.query(Word).filter(Word.learner_id == learner_id)
        if status is not None:
            query = query.filter(Word.status == WordStatus(status).value)
        query = query.order_by(Word.first_seen.desc(), Word.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def word_counts(self, learner_id: int) -> Dict[str, int]:
        """Count a learner's words per status."""
        self.get_learner(learner_id)
        rows = (
            self.db.query(Word.status, func.count(Word.id))
            .filter(Word.learner_id == learner_id)
            .group_by(Word.status)
            .all()
        )
        counts = {status.value: 0 for status in WordStatus}
        counts.update({status: count for status, count in rows})
        counts["total"] = sum(count for _, count in rows)
        return counts

    @staticmethod
    def _validate(values: Dict) -> None:
        if "mastery_threshold" in values and values["mastery_threshold"] < 1:
            raise ValueError("mastery_threshold must be positive")
        if "deck_size" in values and values["deck_size"] < 1:
            raise ValueError("deck_size must be positive")
