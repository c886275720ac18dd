import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from liftsignal.errors import NoDataError, UpstreamFailure
from liftsignal.features import (
    coerce_observation,
    estimate_one_rep_max,
    extract_features,
    set_volume,
)


def test_epley_formula():
    assert estimate_one_rep_max(100.0, 5) == 100.0 * (1 + 5 / 30)
    assert estimate_one_rep_max(60.0, 10) == pytest.approx(80.0)


def test_epley_single_rep_is_not_special_cased():
    # 1 rep still gets the 1/30 bump
    assert estimate_one_rep_max(150.0, 1) == pytest.approx(155.0)


def test_set_volume():
    assert set_volume(102.5, 8) == 820.0


def test_extract_features_is_index_aligned(build_observations):
    sets = [(100, 5, 8.0), (102.5, 4, None), (80, 12, 7.5)]
    observations = build_observations(sets)

    rows = extract_features(observations)

    assert len(rows) == len(observations)
    for obs, row in zip(observations, rows):
        assert row['estimated_max'] == obs['weight'] * (1 + obs['reps'] / 30)
        assert row['volume'] == obs['weight'] * obs['reps']
        assert row['rpe'] == obs['rpe']


def test_extract_features_passes_missing_rpe_through(build_observations):
    rows = extract_features(build_observations([(100, 5, None)]))
    assert rows[0]['rpe'] is None


def test_extract_features_empty_raises_no_data():
    with pytest.raises(NoDataError):
        extract_features([])


def test_coerce_observation_from_db_row():
    row = {
        'performed_at': datetime(2026, 10, 1, 18, 30, tzinfo=timezone.utc),
        'weight': Decimal('102.50'),
        'reps': 5,
        'rpe': Decimal('8.5'),
    }
    obs = coerce_observation(row)
    assert obs['weight'] == 102.5
    assert isinstance(obs['weight'], float)
    assert obs['reps'] == 5
    assert obs['rpe'] == 8.5
    assert obs['performed_at'] == row['performed_at']


def test_coerce_observation_parses_iso_strings_and_assumes_utc():
    obs = coerce_observation({'performed_at': '2026-10-01T18:30:00Z', 'weight': '100', 'reps': '5', 'rpe': None})
    assert obs['performed_at'] == datetime(2026, 10, 1, 18, 30, tzinfo=timezone.utc)
    assert obs['rpe'] is None

    naive = coerce_observation({'performed_at': datetime(2026, 10, 1, 18, 30), 'weight': 100, 'reps': 5})
    assert naive['performed_at'].tzinfo == timezone.utc
    assert naive['rpe'] is None


@pytest.mark.parametrize("row", [
    {'weight': 100, 'reps': 5, 'rpe': None},  # no timestamp
    {'performed_at': '2026-10-01T18:30:00Z', 'weight': 'heavy', 'reps': 5},
    {'performed_at': 12345, 'weight': 100, 'reps': 5},
    {'performed_at': '2026-10-01T18:30:00Z', 'weight': 100, 'reps': None},
])
def test_coerce_observation_malformed_row_is_upstream_failure(row):
    with pytest.raises(UpstreamFailure) as excinfo:
        coerce_observation(row)
    assert "Malformed observation record" in excinfo.value.message


def test_coerce_observation_promotes_date_to_midnight_utc():
    obs = coerce_observation({'performed_at': date(2026, 10, 1), 'weight': 100, 'reps': 5, 'rpe': None})
    assert obs['performed_at'] == datetime(2026, 10, 1, 0, 0, tzinfo=timezone.utc)
    assert obs['performed_at'].tzinfo is not None
