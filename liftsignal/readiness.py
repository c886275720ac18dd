import logging
from statistics import mean
from typing import Optional, Sequence

from liftsignal.constants import (
    ACUTE_CHRONIC_LADDER,
    CHRONIC_WEEKS,
    LOW_OBSERVATION_POINTS,
    LOW_OBSERVATION_THRESHOLD,
    NEGATIVE_SLOPE_POINTS,
    RPE_LADDER,
    RPE_LOOKBACK,
    SCORE_MAX,
    SCORE_MIN,
    STEEP_DECLINE_POINTS,
    STEEP_DECLINE_SLOPE,
)

logger = logging.getLogger(__name__)


def clamp(value, lower, upper):
    return max(lower, min(upper, value))


def acute_chronic_ratio(short_window: Sequence[float], long_window: Sequence[float]) -> float:
    """
    Last acute (short window) load over the chronic weekly load.

    The long window is turned into a weekly rate by dividing by CHRONIC_WEEKS;
    a zero chronic rate is replaced by 1 so the ratio stays finite.
    """
    last_acute = short_window[-1] if short_window else 0.0
    last_chronic = long_window[-1] if long_window else 0.0
    chronic_weekly = last_chronic / CHRONIC_WEEKS
    return last_acute / (chronic_weekly or 1)


def recent_rpe_average(rpe_values: Sequence[Optional[float]], lookback: int = RPE_LOOKBACK) -> Optional[float]:
    """Mean of the RPE values present among the last `lookback` sets, or None if none were logged."""
    present = [r for r in rpe_values[-lookback:] if r is not None]
    if not present:
        return None
    return mean(present)


def calculate_fatigue_index(
    ratio: float,
    slope: float,
    avg_recent_rpe: Optional[float],
    observation_count: int,
) -> int:
    """
    Additive fatigue score in [0, 100].

    Each ladder is cumulative: crossing a higher threshold adds its points on
    top of every lower threshold already crossed. The total is clamped only
    after all rules have contributed.

    Args:
        ratio: Acute/chronic load ratio.
        slope: Rounded e1RM trend slope.
        avg_recent_rpe: Mean recent RPE, or None to skip the RPE rules.
        observation_count: Number of observations in the series.

    Returns:
        The clamped fatigue index as an int.
    """
    fatigue = 0

    for threshold, points in ACUTE_CHRONIC_LADDER:
        if ratio >= threshold:
            fatigue += points

    if slope < 0:
        fatigue += NEGATIVE_SLOPE_POINTS
    if slope < STEEP_DECLINE_SLOPE:
        fatigue += STEEP_DECLINE_POINTS

    if avg_recent_rpe is not None:
        for threshold, points in RPE_LADDER:
            if avg_recent_rpe >= threshold:
                fatigue += points

    if observation_count < LOW_OBSERVATION_THRESHOLD:
        fatigue += LOW_OBSERVATION_POINTS

    clamped = clamp(fatigue, SCORE_MIN, SCORE_MAX)
    logger.debug(
        "Fatigue: ratio=%.3f slope=%.4f rpe=%s n=%d -> raw=%d clamped=%d",
        ratio, slope, avg_recent_rpe, observation_count, fatigue, clamped,
    )
    return clamped


def readiness_from_fatigue(fatigue_index: int) -> int:
    """Readiness is the complement of fatigue, never estimated on its own."""
    return clamp(SCORE_MAX - fatigue_index, SCORE_MIN, SCORE_MAX)
