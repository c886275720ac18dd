"""Confidence score and data quality label for a derived signal set."""

from datetime import datetime
from enum import Enum

from liftsignal.constants import (
    CONFIDENCE_PER_OBSERVATION,
    CONFIDENCE_VOLUME_CAP,
    HIGH_QUALITY_MIN_OBSERVATIONS,
    MEDIUM_QUALITY_MIN_OBSERVATIONS,
    RECENCY_BONUS,
    RECENCY_WINDOW_DAYS,
    SCORE_MAX,
    SCORE_MIN,
)

SECONDS_PER_DAY = 24 * 60 * 60


class DataQuality(Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


def recency_days(last_performed_at: datetime, now: datetime) -> int:
    """Whole days between the most recent observation and now, floored, direction ignored."""
    elapsed = abs((now - last_performed_at).total_seconds())
    return int(elapsed // SECONDS_PER_DAY)


def calculate_confidence_score(observation_count: int, days_since_last: int) -> int:
    base = min(CONFIDENCE_VOLUME_CAP, observation_count * CONFIDENCE_PER_OBSERVATION)
    bonus = RECENCY_BONUS if days_since_last <= RECENCY_WINDOW_DAYS else 0
    return max(SCORE_MIN, min(SCORE_MAX, base + bonus))


def classify_data_quality(observation_count: int, days_since_last: int) -> DataQuality:
    # Separate ladder from the confidence score: Medium ignores recency entirely.
    if observation_count >= HIGH_QUALITY_MIN_OBSERVATIONS and days_since_last <= RECENCY_WINDOW_DAYS:
        return DataQuality.HIGH
    if observation_count >= MEDIUM_QUALITY_MIN_OBSERVATIONS:
        return DataQuality.MEDIUM
    return DataQuality.LOW
