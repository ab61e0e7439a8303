# app/services/spaced_repetition.py
"""
SM-2 review scheduling for mistake-ledger entries.

Quality is the learner's 0-5 rating of how well they recalled the answer
(0 = total failure, 5 = perfect recall). A rating of 3 or more counts as a
pass and grows the interval; anything lower restarts the repetition chain
with a one-day interval. The ease factor is adjusted on every review and
never drops below 1.3.
"""
import math
from datetime import datetime, timedelta

from ..core.config import MIN_EASE_FACTOR
from ..core.errors import ValidationError
from ..schemas.mistake_schemas import ReviewState

MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3

MASTERY_REPETITIONS = 3
MASTERY_INTERVAL_DAYS = 21


def validate_quality(quality) -> int:
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise ValidationError("Quality rating must be an integer between 0 and 5", field="quality")
    if quality < MIN_QUALITY or quality > MAX_QUALITY:
        raise ValidationError("Quality rating must be between 0 and 5", field="quality")
    return quality


def next_ease_factor(ease_factor: float, quality: int) -> float:
    penalty = MAX_QUALITY - quality
    return max(MIN_EASE_FACTOR, ease_factor + 0.1 - penalty * (0.08 + penalty * 0.02))


def next_interval(interval_days: int, repetition: int, ease_factor: float) -> int:
    if repetition == 0:
        return 1
    if repetition == 1:
        return 6
    # round half up
    return int(math.floor(interval_days * ease_factor + 0.5))


def schedule_review(state: ReviewState, quality: int, now: datetime) -> ReviewState:
    quality = validate_quality(quality)

    if quality >= PASSING_QUALITY:
        interval_days = next_interval(state.interval_days, state.repetition, state.ease_factor)
        repetition = state.repetition + 1
    else:
        interval_days = 1
        repetition = 0

    return ReviewState(
        ease_factor=next_ease_factor(state.ease_factor, quality),
        interval_days=interval_days,
        repetition=repetition,
        next_revision_date=now + timedelta(days=interval_days),
        is_mastered=repetition >= MASTERY_REPETITIONS and interval_days >= MASTERY_INTERVAL_DAYS,
    )
