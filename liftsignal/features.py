"""
Per-observation feature extraction.

An observation is one performed set for a tracked exercise:
    {'performed_at': datetime, 'weight': float, 'reps': int, 'rpe': float | None}

Each observation maps to exactly one feature row at the same index:
    {'estimated_max': float, 'volume': float, 'rpe': float | None}
"""
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Mapping, Sequence

from liftsignal.errors import NoDataError, UpstreamFailure

Observation = Dict[str, Any]
FeatureRow = Dict[str, Any]


def estimate_one_rep_max(weight: float, reps: int) -> float:
    """
    Estimated 1 Rep Max using the Epley formula: weight * (1 + reps / 30).

    No rounding and no single-rep shortcut: a 1-rep set still gets the
    1/30 bump so every row goes through the same formula.
    """
    return weight * (1 + reps / 30)


def set_volume(weight: float, reps: int) -> float:
    return weight * reps


def _to_timestamp(value: Any) -> datetime:
    if isinstance(value, str):
        # fromisoformat on older interpreters does not accept a trailing 'Z'
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, date) and not isinstance(value, datetime):
        # DATE columns come back as date; the session counts from midnight UTC
        value = datetime.combine(value, time.min, tzinfo=timezone.utc)
    if not isinstance(value, datetime):
        raise TypeError(f"performed_at must be a timestamp, got {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def coerce_observation(row: Mapping[str, Any]) -> Observation:
    """
    Normalizes a raw store record into an observation.

    psycopg2 hands back NUMERIC columns as Decimal and timestamps as datetime;
    other sources may send ISO strings. Naive timestamps are taken as UTC.

    Raises:
        UpstreamFailure: if the record is missing a field or holds a value
            that cannot be read as the expected type.
    """
    try:
        rpe = row.get('rpe')
        return {
            'performed_at': _to_timestamp(row['performed_at']),
            'weight': float(row['weight']),
            'reps': int(row['reps']),
            'rpe': float(rpe) if rpe is not None else None,
        }
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamFailure(f"Malformed observation record: {e!r}") from e


def extract_features(observations: Sequence[Observation]) -> List[FeatureRow]:
    """Maps every observation to its feature row, preserving index alignment."""
    if not observations:
        raise NoDataError()

    rows = []
    for obs in observations:
        weight = obs['weight']
        reps = obs['reps']
        rows.append({
            'estimated_max': estimate_one_rep_max(weight, reps),
            'volume': set_volume(weight, reps),
            'rpe': obs.get('rpe'),  # passed through, absent stays absent
        })
    return rows
