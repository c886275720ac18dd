"""Rolling volume windows, e1RM trend fitting and plateau detection."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from statistics import mean
from typing import List, Sequence

from liftsignal.constants import (
    PLATEAU_BLOCK_SIZE,
    PLATEAU_MIN_OBSERVATIONS,
    SLOPE_DECIMALS,
    TREND_LOOKBACK,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float, decimals: int) -> float:
    """
    Rounds the exact binary value of `value`, breaking ties away from zero.

    The built-in round() sends ties to even, so 1.0625 would become 1.062.
    """
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def rolling_sum(values: Sequence[float], window: int) -> List[float]:
    """
    Trailing-window sums, same length as `values`.

    Element i is sum(values[max(0, i - window + 1) : i + 1]). Windows at the
    start of the series are truncated rather than zero-padded, so early
    entries cover fewer points than `window`.
    """
    if window < 1:
        raise ValueError(f"window must be at least 1, got {window}")

    return [
        sum(values[max(0, i - window + 1):i + 1])
        for i in range(len(values))
    ]


def calculate_trend_slope(values: Sequence[float]) -> float:
    """Return slope of a simple linear regression y = ax + b over x = 0..n-1."""
    n = len(values)
    if n < 2:
        return 0.0
    x_vals = range(n)
    x_mean = mean(x_vals)
    y_mean = mean(values)
    num = sum((x - x_mean) * (y - y_mean) for x, y in zip(x_vals, values))
    den = sum((x - x_mean) ** 2 for x in x_vals)
    return num / den if den else 0.0


def trend_slope(e1rm_values: Sequence[float], lookback: int = TREND_LOOKBACK) -> float:
    """
    Slope of the trailing `lookback` e1RM values, rounded for reporting.

    Index positions are the x-axis, so sessions are treated as evenly spaced
    no matter how many days separate them.
    """
    recent = list(e1rm_values[-lookback:]) if lookback > 0 else []
    return round_half_up(calculate_trend_slope(recent), SLOPE_DECIMALS)


def detect_plateau(e1rm_values: Sequence[float], slope: float) -> bool:
    """
    True when the latest block of e1RM values averages no higher than the
    block before it AND the overall trend is flat or falling.

    A dip in the recent average alone is not a plateau while the trend is
    still rising.
    """
    n = len(e1rm_values)
    if n < PLATEAU_MIN_OBSERVATIONS:
        return False

    last_block = e1rm_values[-PLATEAU_BLOCK_SIZE:]
    prev_block = e1rm_values[-2 * PLATEAU_BLOCK_SIZE:-PLATEAU_BLOCK_SIZE]
    last_avg = mean(last_block)
    prev_avg = mean(prev_block)

    plateauing = last_avg <= prev_avg and slope <= 0
    if plateauing:
        logger.debug(
            "Plateau detected: last %d avg %.2f <= previous avg %.2f, slope %.4f",
            PLATEAU_BLOCK_SIZE, last_avg, prev_avg, slope,
        )
    return plateauing
