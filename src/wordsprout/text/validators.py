"""Pluggable word validators used to filter OCR tokens."""
import re
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence

from wordsprout.text.wordlists import COMMON_WORDS, STOP_WORDS, is_known_word

LETTERS_ONLY = re.compile(r"^[a-z]+$")
VOWEL = re.compile(r"[aeiouy]")
TRIPLE_CHARACTER = re.compile(r"(.)\1\1")
CONSONANT_RUN = re.compile(r"[bcdfghjklmnpqrstvwxz]{5,}")
ALL_CONSONANTS = re.compile(r"^[bcdfghjklmnpqrstvwxz]+$")

STRICT_MAX_LENGTH = 18
LENIENT_MAX_LENGTH = 20
MIN_UNKNOWN_LENGTH = 3


class WordValidator(ABC):
    """Predicate deciding whether a lowercase token is kept as vocabulary."""

    @abstractmethod
    def is_valid(self, word: str) -> bool:
        """Return True if the word should be kept."""
        raise NotImplementedError("Subclasses must implement this method")

    def __call__(self, word: str) -> bool:
        return self.is_valid(word)


class ShapeValidator(WordValidator):
    """Rejects tokens whose letter shape looks like OCR noise."""

    def __init__(self, min_length: int = MIN_UNKNOWN_LENGTH, max_length: int = STRICT_MAX_LENGTH):
        self.min_length = min_length
        self.max_length = max_length

    def is_valid(self, word: str) -> bool:
        if not self.min_length <= len(word) <= self.max_length:
            return False
        if not LETTERS_ONLY.match(word):
            return False
        if not VOWEL.search(word):
            return False
        if TRIPLE_CHARACTER.search(word):
            return False
        if CONSONANT_RUN.search(word):
            return False
        if len(word) > 3 and ALL_CONSONANTS.match(word):
            return False
        return True


class AllowListValidator(WordValidator):
    """Accepts only words from a fixed list."""

    def __init__(self, words: Iterable[str] = COMMON_WORDS, max_length: int = LENIENT_MAX_LENGTH):
        self.words = frozenset(w.lower() for w in words)
        self.max_length = max_length

    def is_valid(self, word: str) -> bool:
        return 0 < len(word) <= self.max_length and word in self.words


class StopWordFilter(WordValidator):
    """Drops stop words."""

    def __init__(self, stop_words: Iterable[str] = STOP_WORDS):
        self.stop_words = frozenset(stop_words)

    def is_valid(self, word: str) -> bool:
        return word not in self.stop_words


class GradeLevelFilter(WordValidator):
    """Keeps only words of the grade-level dictionary (stop words included)."""

    def is_valid(self, word: str) -> bool:
        return is_known_word(word)


class CompositeValidator(WordValidator):
    """Shape check with an optional allow-list bypass, followed by filters.

    A word passes when it is allow-listed or passes the shape validator, and
    then every filter accepts it.
    """

    def __init__(
        self,
        shape: WordValidator,
        allow_list: Optional[WordValidator] = None,
        filters: Sequence[WordValidator] = (),
    ):
        self.shape = shape
        self.allow_list = allow_list
        self.filters = list(filters)

    def is_valid(self, word: str) -> bool:
        word = word.lower()
        if not LETTERS_ONLY.match(word):
            return False
        accepted = (self.allow_list is not None and self.allow_list.is_valid(word)) or self.shape.is_valid(word)
        if not accepted:
            return False
        return all(f.is_valid(word) for f in self.filters)


def build_validator(
    lenient: bool = True,
    filter_stop_words: bool = False,
    filter_by_grade_level: bool = False,
) -> CompositeValidator:
    """Build the validator for a normalizer mode and learner filters.

    Lenient mode lets allow-listed short words (``a``, ``on``, ``it``) through
    and tolerates longer tokens; strict mode applies the shape rules to every
    token.
    """
    filters = []
    if filter_stop_words:
        filters.append(StopWordFilter())
    if filter_by_grade_level:
        filters.append(GradeLevelFilter())

    if lenient:
        return CompositeValidator(
            ShapeValidator(MIN_UNKNOWN_LENGTH, LENIENT_MAX_LENGTH),
            allow_list=AllowListValidator(COMMON_WORDS, LENIENT_MAX_LENGTH),
            filters=filters,
        )
    return CompositeValidator(ShapeValidator(MIN_UNKNOWN_LENGTH, STRICT_MAX_LENGTH), filters=filters)
