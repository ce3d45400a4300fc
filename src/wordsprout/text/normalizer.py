"""Text normalizer turning raw OCR output into candidate vocabulary."""
import logging
import re
import unicodedata
from typing import Dict, List, Optional

from wordsprout.config import NormalizerSettings, settings
from wordsprout.models.engine_models import CleaningStats, LearnerConfig, NormalizedText, RepeatedWord
from wordsprout.text.validators import WordValidator, build_validator
from wordsprout.text.wordlists import COMMON_WORDS, STOP_WORDS, is_known_word

logger = logging.getLogger(__name__)

PUNCTUATION_MAP = str.maketrans({
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "–": "-",
    "—": "-",
})
CONTROL_CHARACTERS = re.compile(r"[\x00-\x09\x0b-\x1f\x7f-\x9f]")
HYPHENATED_BREAK = re.compile(r"(\w)-[ \t]*\n\s*(\w)")

# OCR frequently reads these letters as digits
DIGIT_FIXES = {"0": "o", "1": "l", "5": "s", "8": "b"}
LEADING_DIGIT_CANDIDATES = {"0": "o", "1": "il", "5": "s", "8": "b"}
FLANKED_DIGIT = re.compile(r"(?<=[A-Za-z])([0158])(?=[A-Za-z])")
LEADING_DIGIT = re.compile(r"\b([0158])([A-Za-z]+)\b")
STANDALONE_L = re.compile(r"\bl\b")
WORD_FIXES = [
    (re.compile(r"\brn\b"), "m"),
    (re.compile(r"\bvv\b"), "w"),
]

LETTER = re.compile(r"[A-Za-z]")
DISALLOWED_CHARACTERS = re.compile(r"[^A-Za-z\s'.,!?-]+")
ISOLATED_LETTER = re.compile(r"\b[b-hj-z]\b", re.IGNORECASE)
WHITESPACE = re.compile(r"\s+")
WORD_TOKEN = re.compile(r"[A-Za-z]+")
RAW_TOKEN = re.compile(r"\S+")


def _fix_leading_digit(match: re.Match) -> str:
    digit, rest = match.group(1), match.group(2)
    for letter in LEADING_DIGIT_CANDIDATES[digit]:
        candidate = (letter + rest).lower()
        if candidate in COMMON_WORDS or is_known_word(candidate):
            return letter + rest
    return DIGIT_FIXES[digit] + rest


def fix_ocr_mistakes(text: str) -> str:
    """Replace digits and letter pairs that OCR commonly confuses."""
    text = FLANKED_DIGIT.sub(lambda m: DIGIT_FIXES[m.group(1)], text)
    text = LEADING_DIGIT.sub(_fix_leading_digit, text)
    text = STANDALONE_L.sub("I", text)
    for pattern, replacement in WORD_FIXES:
        text = pattern.sub(replacement, text)
    return text


def normalize_unicode(text: str) -> str:
    """Decompose accents, map typographic punctuation to ASCII and blank control characters."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.translate(PUNCTUATION_MAP)
    text = unicodedata.normalize("NFKD", text)
    text = "".join(c for c in text if not unicodedata.combining(c))
    return CONTROL_CHARACTERS.sub(" ", text)


class TextNormalizer:
    """Best-effort cleanup of noisy page text.

    Lines that look like headers, footers or page numbers are dropped, the
    remaining text is stripped of symbols and tokenized, and every token must
    pass the configured ``WordValidator``. Precision is preferred over recall:
    malformed input produces an empty result instead of an error.
    """

    def __init__(
        self,
        validator: Optional[WordValidator] = None,
        filter_stop_words: bool = False,
        filter_by_grade_level: bool = False,
        normalizer_settings: Optional[NormalizerSettings] = None,
    ):
        self.settings = normalizer_settings or settings.normalizer
        self.validator = validator or build_validator(
            lenient=self.settings.lenient,
            filter_stop_words=filter_stop_words,
            filter_by_grade_level=filter_by_grade_level,
        )

    @classmethod
    def for_learner(cls, config: LearnerConfig) -> "TextNormalizer":
        """Create a normalizer honoring a learner's filter preferences."""
        return cls(
            filter_stop_words=config.stop_words_enabled,
            filter_by_grade_level=config.grade_level_filter_enabled,
        )

    def has_good_letter_density(self, line: str) -> bool:
        """Whether a line has enough letters to be page text."""
        stripped = line.strip()
        if not stripped:
            return False
        letters = len(LETTER.findall(stripped))
        density = letters / len(stripped)
        return density >= self.settings.min_letter_density or (
            letters >= self.settings.relaxed_min_letters
            and density >= self.settings.relaxed_letter_density
        )

    @staticmethod
    def clean_line(line: str) -> str:
        """Strip symbols, stray single letters and extra whitespace from a line."""
        line = DISALLOWED_CHARACTERS.sub(" ", line)
        line = ISOLATED_LETTER.sub(" ", line)
        return WHITESPACE.sub(" ", line).strip()

    def clean_text(self, raw_text: str) -> str:
        """Run the cleanup stages and return the surviving lines."""
        text = normalize_unicode(raw_text)
        text = HYPHENATED_BREAK.sub(r"\1\2", text)
        text = fix_ocr_mistakes(text)

        lines: List[str] = []
        for line in text.split("\n"):
            if not self.has_good_letter_density(line):
                continue
            cleaned = self.clean_line(line)
            if not cleaned:
                continue
            # OCR sometimes repeats a line
            if lines and lines[-1] == cleaned:
                continue
            lines.append(cleaned)
        return "\n".join(lines)

    def normalize(self, raw_text: str) -> NormalizedText:
        """Clean raw text and extract candidate words with their frequencies."""
        if not isinstance(raw_text, str) or not raw_text.strip():
            return NormalizedText()

        cleaned_text = self.clean_text(raw_text)

        frequencies: Dict[str, int] = {}
        for token in WORD_TOKEN.findall(cleaned_text):
            word = token.lower()
            if not self.validator.is_valid(word):
                continue
            frequencies[word] = frequencies.get(word, 0) + 1

        logger.debug("Normalized text into %d candidate words", len(frequencies))
        return NormalizedText(
            cleaned_text=cleaned_text,
            candidate_words=list(frequencies),
            word_frequencies=frequencies,
        )


def normalize(raw_text: str, config: Optional[LearnerConfig] = None) -> NormalizedText:
    """Normalize text with default settings or a learner's filters."""
    normalizer = TextNormalizer.for_learner(config) if config else TextNormalizer()
    return normalizer.normalize(raw_text)


def top_repeated_words(word_frequencies: Dict[str, int], limit: int = 10) -> List[RepeatedWord]:
    """Most frequent non-stop words of at least three letters.

    Ties keep first-appearance order.
    """
    candidates = [
        (word, count)
        for word, count in word_frequencies.items()
        if len(word) >= 3 and word not in STOP_WORDS
    ]
    candidates.sort(key=lambda item: item[1], reverse=True)
    return [RepeatedWord(word=word, count=count) for word, count in candidates[:limit]]


def cleaning_stats(raw_text: str, cleaned_text: str) -> CleaningStats:
    """How many whitespace-separated tokens survived cleaning."""
    raw_count = len(RAW_TOKEN.findall(raw_text or ""))
    cleaned_count = len(RAW_TOKEN.findall(cleaned_text or ""))
    percentage = round(cleaned_count / raw_count * 100) if raw_count > 0 else 0
    return CleaningStats(
        raw_word_count=raw_count,
        cleaned_word_count=cleaned_count,
        percentage_kept=percentage,
    )
