"""Tests for the text normalizer and word validators."""
import pytest

from wordsprout.config import NormalizerSettings
from wordsprout.models.engine_models import LearnerConfig
from wordsprout.text.normalizer import (
    TextNormalizer,
    cleaning_stats,
    fix_ocr_mistakes,
    normalize,
    normalize_unicode,
    top_repeated_words,
)
from wordsprout.text.validators import (
    AllowListValidator,
    CompositeValidator,
    ShapeValidator,
    StopWordFilter,
    build_validator,
)


@pytest.fixture
def normalizer() -> TextNormalizer:
    """Create a lenient normalizer without learner filters."""
    return TextNormalizer(normalizer_settings=NormalizerSettings(lenient=True))


def test_normalize_page_text(normalizer):
    """Test the common case of a short page with an OCR digit mistake."""
    result = normalizer.normalize("The the cat sat on teh mat. 1t was a sunny day.")

    assert {"the", "cat", "sat", "on", "it", "was", "a", "sunny", "day"} <= set(result.candidate_words)
    assert result.word_frequencies["the"] == 2
    assert result.candidate_words[:3] == ["the", "cat", "sat"]
    assert len(result.candidate_words) == len(set(result.candidate_words))


def test_candidate_words_are_lowercase(normalizer):
    """Test candidate words are lower-cased and counted case-insensitively."""
    result = normalizer.normalize("Rocket ROCKET rocket")
    assert result.candidate_words == ["rocket"]
    assert result.word_frequencies == {"rocket": 3}


@pytest.mark.parametrize("raw_text", [None, "", "   \n\t", 42, ["cat"]])
def test_malformed_input_returns_empty_result(normalizer, raw_text):
    """Test the normalizer never raises on malformed input."""
    result = normalizer.normalize(raw_text)
    assert result.cleaned_text == ""
    assert result.candidate_words == []
    assert result.word_frequencies == {}


def test_module_normalize_uses_learner_filters():
    """Test stop words are dropped when the learner enables filtering."""
    text = "the rocket went to the moon"
    unfiltered = normalize(text)
    filtered = normalize(text, LearnerConfig(stop_words_enabled=True))

    assert "the" in unfiltered.candidate_words
    assert "the" not in filtered.candidate_words
    assert "rocket" in filtered.candidate_words


def test_grade_level_filter_keeps_dictionary_words():
    """Test the grade-level filter keeps only dictionary and stop words."""
    result = normalize("the planet zorbix glows", LearnerConfig(grade_level_filter_enabled=True))
    assert "planet" in result.candidate_words
    assert "the" in result.candidate_words
    assert "zorbix" not in result.candidate_words


def test_low_density_lines_are_dropped(normalizer):
    """Test page numbers and symbol-heavy lines are treated as noise."""
    result = normalizer.normalize("Page 12\n12345 ### 678\nThe dragon flew home.")
    assert result.cleaned_text == "The dragon flew home."
    assert "dragon" in result.candidate_words


def test_relaxed_density_keeps_long_lines(normalizer):
    """Test a line with many letters survives at a lower letter density."""
    line = "dragons 1234567 castle 89 99"
    assert normalizer.has_good_letter_density(line)
    assert not normalizer.has_good_letter_density("ab 123456")
    assert not normalizer.has_good_letter_density("   ")


def test_hyphenated_line_break_is_rejoined(normalizer):
    """Test words split across lines by a hyphen are rejoined."""
    result = normalizer.normalize("The astro-\nnaut waved.")
    assert "astronaut" in result.candidate_words


def test_consecutive_duplicate_lines_are_collapsed(normalizer):
    """Test OCR line repetition is removed."""
    result = normalizer.normalize("The frog jumped.\nThe frog jumped.\nThe end.")
    assert result.cleaned_text == "The frog jumped.\nThe end."
    assert result.word_frequencies["frog"] == 1


def test_isolated_letters_are_removed(normalizer):
    """Test single stray letters are removed except I and a."""
    assert normalizer.clean_line("I saw a x cat q") == "I saw a cat"


def test_symbols_are_stripped(normalizer):
    """Test symbols outside the punctuation set are removed."""
    assert normalizer.clean_line("Stars @@ shine *brightly*!") == "Stars shine brightly !"


def test_unicode_is_folded_to_ascii():
    """Test accents, typographic quotes and control characters are normalized."""
    text = normalize_unicode("café “hello” — it’s\x07ok\r\nnext")
    assert text == 'cafe "hello" - it\'s ok\nnext'


@pytest.mark.parametrize("raw, expected", [
    ("g0od", "good"),
    ("he1p", "help"),
    ("ca5e", "case"),
    ("ro8ot", "robot"),
    ("1t is", "it is"),
    ("1ike", "like"),
    ("rn", "m"),
    ("vv", "w"),
    ("and l went", "and I went"),
])
def test_fix_ocr_mistakes(raw, expected):
    """Test common optical confusions are corrected."""
    assert fix_ocr_mistakes(raw) == expected


def test_numbers_are_not_rewritten():
    """Test plain numbers are left for the density filter."""
    assert fix_ocr_mistakes("page 10 of 58") == "page 10 of 58"


def test_top_repeated_words():
    """Test top words skip stop words and short words and keep tie order."""
    frequencies = {"the": 9, "cat": 2, "on": 5, "moon": 3, "dog": 2, "sun": 1}
    top = top_repeated_words(frequencies, limit=3)
    assert [(w.word, w.count) for w in top] == [("moon", 3), ("cat", 2), ("dog", 2)]


def test_cleaning_stats():
    """Test cleaning stats count whitespace tokens."""
    stats = cleaning_stats("one two three four", "one two three")
    assert stats.raw_word_count == 4
    assert stats.cleaned_word_count == 3
    assert stats.percentage_kept == 75

    empty = cleaning_stats("", "")
    assert empty.percentage_kept == 0


class TestValidators:
    """Tests for word validators."""

    @pytest.mark.parametrize("word", ["cat", "sunny", "rhythm", "astronaut"])
    def test_shape_accepts_words(self, word):
        assert ShapeValidator().is_valid(word)

    @pytest.mark.parametrize("word", [
        "ab",  # too short
        "a" * 19,  # too long
        "bzzzt",  # triple character
        "strngth",  # consonant run
        "cr4b",  # non-letter
        "",
    ])
    def test_shape_rejects_noise(self, word):
        assert not ShapeValidator().is_valid(word)

    def test_allow_list_bypasses_shape(self):
        validator = CompositeValidator(ShapeValidator(), allow_list=AllowListValidator())
        assert validator.is_valid("a")
        assert validator.is_valid("on")
        assert not validator.is_valid("qz")

    def test_filters_apply_after_allow_list(self):
        validator = CompositeValidator(
            ShapeValidator(),
            allow_list=AllowListValidator(),
            filters=[StopWordFilter()],
        )
        assert not validator.is_valid("the")
        assert validator.is_valid("rocket")

    def test_unknown_words_need_three_letters_in_both_modes(self):
        assert not build_validator(lenient=True).is_valid("ox")
        assert not build_validator(lenient=False).is_valid("ox")
        assert build_validator(lenient=True).is_valid("fox")

    def test_strict_mode_has_no_allow_list(self):
        strict = build_validator(lenient=False)
        assert not strict.is_valid("on")
        assert strict.is_valid("cat")
        assert not strict("abcdefghijklmnopqrs")

    def test_validation_is_deterministic(self):
        validator = build_validator()
        words = ["cat", "sunny", "teh", "qqq", "on", "xyzzy", "butterfly"]
        first = [validator.is_valid(w) for w in words]
        second = [validator.is_valid(w) for w in words]
        assert first == second
