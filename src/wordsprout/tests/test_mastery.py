"""Tests for the word mastery state machine."""
from datetime import UTC, datetime

import pytest

from wordsprout.models.engine_models import LearnerConfig, WordState
from wordsprout.models.models import WordStatus
from wordsprout.services.mastery import apply_correct, apply_force_master, apply_incorrect, apply_result

NEW = WordStatus.NEW.value
LEARNING = WordStatus.LEARNING.value
MASTERED = WordStatus.MASTERED.value


@pytest.fixture
def config() -> LearnerConfig:
    """Learner configuration with a threshold of 3 and demotion enabled."""
    return LearnerConfig(mastery_threshold=3, demote_on_miss=True)


def test_three_correct_results_master_a_new_word(config):
    """Test a new word is mastered after reaching the threshold."""
    state = WordState(status=NEW)
    statuses = []
    for _ in range(3):
        state = apply_correct(state, config)
        statuses.append(state.status)

    assert statuses == [LEARNING, LEARNING, MASTERED]
    assert state.mastery_correct_count == 3


def test_review_miss_demotes_mastered_word(config):
    """Test a miss in a review context demotes a mastered word."""
    state = WordState(status=MASTERED, mastery_correct_count=3)
    state = apply_incorrect(state, config, is_review=True)

    assert state.status == LEARNING
    assert state.mastery_correct_count == 2
    assert state.incorrect_count == 1


def test_miss_outside_review_keeps_mastery(config):
    """Test a miss outside review only lowers the correct count."""
    state = apply_incorrect(WordState(status=MASTERED, mastery_correct_count=3), config)
    assert state.status == MASTERED
    assert state.mastery_correct_count == 2


def test_review_miss_without_demotion(config):
    """Test demotion can be disabled per learner."""
    no_demote = LearnerConfig(mastery_threshold=3, demote_on_miss=False)
    state = apply_incorrect(WordState(status=MASTERED, mastery_correct_count=3), no_demote, is_review=True)
    assert state.status == MASTERED


def test_first_miss_moves_new_word_to_learning(config):
    """Test the first result of either polarity leaves the new state."""
    state = apply_incorrect(WordState(status=NEW), config)
    assert state.status == LEARNING
    assert state.mastery_correct_count == 0
    assert state.incorrect_count == 1


def test_threshold_of_one_masters_immediately():
    """Test a threshold of one masters a new word on the first correct result."""
    state = apply_correct(WordState(status=NEW), LearnerConfig(mastery_threshold=1))
    assert state.status == MASTERED


def test_correct_count_moves_with_results(config):
    """Test correct answers always count up and misses never go below zero."""
    state = WordState(status=NEW)
    sequence = [True, False, False, False, True, True, True, True, True, False, True]
    for is_correct in sequence:
        previous = state
        state = apply_result(state, is_correct, config, is_review=True)
        if is_correct:
            assert state.mastery_correct_count == previous.mastery_correct_count + 1
        else:
            assert state.mastery_correct_count == max(previous.mastery_correct_count - 1, 0)
        if is_correct and state.mastery_correct_count >= config.mastery_threshold:
            assert state.status == MASTERED
        if state.mastery_correct_count < config.mastery_threshold and previous.status != MASTERED:
            assert state.status != MASTERED


def test_correct_answers_past_threshold_keep_margin(config):
    """Test extra correct answers cushion a later review demotion."""
    state = WordState(status=NEW)
    for _ in range(5):
        state = apply_correct(state, config)
    assert (state.status, state.mastery_correct_count) == (MASTERED, 5)

    for _ in range(2):
        state = apply_incorrect(state, config)
    assert (state.status, state.mastery_correct_count) == (MASTERED, 3)

    state = apply_incorrect(state, config, is_review=True)
    assert (state.status, state.mastery_correct_count) == (LEARNING, 2)

    state = apply_correct(state, config)
    assert (state.status, state.mastery_correct_count) == (MASTERED, 3)


def test_mastered_only_after_reaching_threshold(config):
    """Test a learning word stays learning below the threshold."""
    state = WordState(status=LEARNING, mastery_correct_count=1)
    state = apply_correct(state, config)
    assert state.status == LEARNING
    state = apply_correct(state, config)
    assert state.status == MASTERED


def test_last_tested_is_updated(config):
    """Test every result stamps the test time."""
    now = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    assert apply_result(WordState(status=NEW), True, config, now=now).last_tested == now
    assert apply_result(WordState(status=NEW), False, config, now=now).last_tested == now
    assert apply_result(WordState(status=NEW), True, config).last_tested is not None


def test_transitions_do_not_mutate_input(config):
    """Test transition functions return new states."""
    state = WordState(status=NEW)
    apply_correct(state, config)
    assert state.status == NEW
    assert state.mastery_correct_count == 0


@pytest.mark.parametrize("status", [NEW, LEARNING, MASTERED])
def test_force_master_from_any_state(config, status):
    """Test force master jumps to mastered with a full correct count."""
    state = apply_force_master(WordState(status=status, incorrect_count=2), config)
    assert state.status == MASTERED
    assert state.mastery_correct_count == config.mastery_threshold
    assert state.incorrect_count == 2
