import pytest
from unittest.mock import MagicMock
import os
import sys
from datetime import datetime, timedelta, timezone

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from liftsignal.app import app

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_observations(sets, last_at=NOW, spacing_days=2):
    """Builds an oldest-first observation list from (weight, reps, rpe) tuples."""
    n = len(sets)
    return [
        {
            'performed_at': last_at - timedelta(days=spacing_days * (n - 1 - i)),
            'weight': float(weight),
            'reps': reps,
            'rpe': rpe,
        }
        for i, (weight, reps, rpe) in enumerate(sets)
    ]


@pytest.fixture()
def client():
    app.config.update(TESTING=True)
    with app.test_client() as client:
        yield client


@pytest.fixture
def mock_db_conn():
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = conn.cursor_instance
    return conn


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def build_observations():
    return make_observations
