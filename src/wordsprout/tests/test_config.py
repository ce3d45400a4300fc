"""Tests for configuration."""
import pytest

from wordsprout.config import (
    LEVERAGE_SCALE,
    READINESS_THRESHOLD,
    MasterySettings,
    NormalizerSettings,
    ReadinessSettings,
    ResyncSettings,
    Settings,
    settings,
)


def test_settings_loaded():
    """Test the global settings point at the test database."""
    assert settings.database.url.startswith("sqlite:///")
    assert "test" in settings.database.url
    assert settings.monitoring.enabled is False


def test_engine_constants():
    """Test engine-wide constants."""
    assert READINESS_THRESHOLD == 90
    assert LEVERAGE_SCALE == 1000
    assert Settings().readiness.threshold == 90


def test_normalizer_defaults():
    """Test letter density defaults."""
    normalizer = NormalizerSettings()
    assert normalizer.min_letter_density == 0.6
    assert normalizer.relaxed_letter_density == 0.4
    assert normalizer.relaxed_min_letters == 10


def test_validate_accepts_defaults():
    """Test default settings are valid."""
    Settings().validate()


@pytest.mark.parametrize("overrides, message", [
    ({"mastery": MasterySettings(mastery_threshold=0)}, "MASTERY_THRESHOLD"),
    ({"mastery": MasterySettings(deck_size=0)}, "DECK_SIZE"),
    ({"readiness": ReadinessSettings(threshold=101)}, "READINESS_THRESHOLD"),
    ({"normalizer": NormalizerSettings(min_letter_density=1.5)}, "MIN_LETTER_DENSITY"),
    ({"resync": ResyncSettings(max_attempts=0)}, "RESYNC_MAX_ATTEMPTS"),
])
def test_validate_rejects_invalid_settings(overrides, message):
    """Test invalid settings raise ValueError."""
    with pytest.raises(ValueError, match=message):
        Settings(**overrides).validate()
