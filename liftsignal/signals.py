"""
Signal derivation pipeline.

Turns the ordered observation series for one exercise into the response body
served by the intelligence endpoint:

    {
        'series':  {'dates', 'e1rm', 'volume_7d', 'volume_30d'},
        'signals': {'slope', 'plateau_detected', 'fatigue_index',
                    'readiness_score', 'acute_chronic_ratio'},
        'meta':    {'confidence_score', 'data_quality', 'observations'},
    }

Everything is recomputed from scratch on each call. The only input that is
not part of the series is `now`, used for the recency check.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from liftsignal.confidence import calculate_confidence_score, classify_data_quality, recency_days
from liftsignal.constants import LONG_VOLUME_WINDOW, RATIO_DECIMALS, SHORT_VOLUME_WINDOW
from liftsignal.errors import NoDataError
from liftsignal.features import Observation, extract_features
from liftsignal.progression import detect_plateau, rolling_sum, round_half_up, trend_slope
from liftsignal.readiness import (
    acute_chronic_ratio,
    calculate_fatigue_index,
    readiness_from_fatigue,
    recent_rpe_average,
)

logger = logging.getLogger(__name__)


def derive_signals(observations: Sequence[Observation], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Runs every stage over the observation series and assembles the payload.

    Args:
        observations: Coerced observations for a single exercise key.
        now: Reference time for the recency check. Defaults to the current
             UTC time; pass a fixed value for reproducible output.

    Raises:
        NoDataError: if `observations` is empty. Nothing is computed.
    """
    if not observations:
        raise NoDataError()
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        # Observations are always aware after coercion; read a naive now as UTC like they are
        now = now.replace(tzinfo=timezone.utc)

    # Stable sort: an already ordered series comes back unchanged.
    ordered = sorted(observations, key=lambda obs: obs['performed_at'])
    count = len(ordered)

    features = extract_features(ordered)
    e1rm = [row['estimated_max'] for row in features]
    volume = [row['volume'] for row in features]
    rpe = [row['rpe'] for row in features]

    volume_7d = rolling_sum(volume, SHORT_VOLUME_WINDOW)
    volume_30d = rolling_sum(volume, LONG_VOLUME_WINDOW)

    slope = trend_slope(e1rm)
    plateau_detected = detect_plateau(e1rm, slope)

    ratio = acute_chronic_ratio(volume_7d, volume_30d)
    fatigue_index = calculate_fatigue_index(ratio, slope, recent_rpe_average(rpe), count)
    readiness_score = readiness_from_fatigue(fatigue_index)

    days_since_last = recency_days(ordered[-1]['performed_at'], now)
    confidence_score = calculate_confidence_score(count, days_since_last)
    data_quality = classify_data_quality(count, days_since_last)

    logger.info(
        "Derived signals for %d observations: slope=%.4f plateau=%s fatigue=%d readiness=%d quality=%s",
        count, slope, plateau_detected, fatigue_index, readiness_score, data_quality.value,
    )

    return {
        'series': {
            'dates': [obs['performed_at'].isoformat() for obs in ordered],
            'e1rm': e1rm,
            'volume_7d': volume_7d,
            'volume_30d': volume_30d,
        },
        'signals': {
            'slope': slope,
            'plateau_detected': plateau_detected,
            'fatigue_index': fatigue_index,
            'readiness_score': readiness_score,
            'acute_chronic_ratio': round_half_up(ratio, RATIO_DECIMALS),
        },
        'meta': {
            'confidence_score': confidence_score,
            'data_quality': data_quality.value,
            'observations': count,
        },
    }
