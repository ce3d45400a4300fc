"""Word mastery state machine.

States are ``new``, ``learning`` and ``mastered``:

* ``new -> learning`` on the first practice result of either polarity;
* ``learning -> mastered`` once the correct count reaches the threshold;
* ``mastered -> learning`` only on a miss in a review context with
  demotion enabled;
* ``force_master`` jumps to ``mastered`` from any state.

The functions here are pure; callers persist the returned state.
"""
from dataclasses import replace
from datetime import UTC, datetime
from typing import Optional

from wordsprout.models.engine_models import LearnerConfig, WordState
from wordsprout.models.models import WordStatus


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(UTC)


def apply_correct(state: WordState, config: LearnerConfig, now: Optional[datetime] = None) -> WordState:
    """Transition for a correct answer."""
    correct_count = state.mastery_correct_count + 1
    status = state.status
    if correct_count >= config.mastery_threshold:
        status = WordStatus.MASTERED.value
    elif status == WordStatus.NEW.value:
        status = WordStatus.LEARNING.value
    return replace(state, status=status, mastery_correct_count=correct_count, last_tested=_now(now))


def apply_incorrect(
    state: WordState,
    config: LearnerConfig,
    is_review: bool = False,
    now: Optional[datetime] = None,
) -> WordState:
    """Transition for a missed answer."""
    status = state.status
    if is_review and config.demote_on_miss and status == WordStatus.MASTERED.value:
        status = WordStatus.LEARNING.value
    elif status == WordStatus.NEW.value:
        status = WordStatus.LEARNING.value
    return replace(
        state,
        status=status,
        mastery_correct_count=max(state.mastery_correct_count - 1, 0),
        incorrect_count=state.incorrect_count + 1,
        last_tested=_now(now),
    )


def apply_result(
    state: WordState,
    is_correct: bool,
    config: LearnerConfig,
    is_review: bool = False,
    now: Optional[datetime] = None,
) -> WordState:
    """Next state of a word after a practice result."""
    if is_correct:
        return apply_correct(state, config, now)
    return apply_incorrect(state, config, is_review, now)


def apply_force_master(state: WordState, config: LearnerConfig, now: Optional[datetime] = None) -> WordState:
    """Mark a word mastered after external certification, e.g. repeated spoken matches."""
    return replace(
        state,
        status=WordStatus.MASTERED.value,
        mastery_correct_count=config.mastery_threshold,
        last_tested=_now(now),
    )
