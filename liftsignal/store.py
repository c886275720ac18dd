"""Read access to logged sets, keyed by exercise (lift) key."""
from typing import List

import psycopg2
import psycopg2.extras
from psycopg2 import sql

from liftsignal.app import app, get_db_connection, release_db_connection, logger
from liftsignal.errors import UpstreamFailure
from liftsignal.features import Observation, coerce_observation


def fetch_observations(conn, exercise_key: str, table: str = "workout_sets") -> List[Observation]:
    """
    Returns every logged set for `exercise_key`, oldest first.

    An empty list is a valid result. Database errors and unreadable rows are
    raised as UpstreamFailure carrying the underlying message.
    """
    query = sql.SQL("""
        SELECT performed_at, weight, reps, rpe
        FROM {table}
        WHERE lift_key = %s
        ORDER BY performed_at ASC;
    """).format(table=sql.Identifier(table))

    try:
        with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
            cur.execute(query, (exercise_key,))
            rows = cur.fetchall()
    except psycopg2.Error as e:
        logger.error(f"Database error fetching observations for lift '{exercise_key}': {e}")
        raise UpstreamFailure(str(e).strip() or e.__class__.__name__) from e

    return [coerce_observation(row) for row in rows]


def load_observations(exercise_key: str) -> List[Observation]:
    """Fetches observations on a pooled connection, always handing the connection back."""
    conn = None
    try:
        conn = get_db_connection()
        return fetch_observations(conn, exercise_key, app.config['OBSERVATIONS_TABLE'])
    except psycopg2.Error as e:
        # Pool exhaustion and connection errors surface here, before any query runs
        logger.error(f"Could not obtain a database connection for lift '{exercise_key}': {e}")
        raise UpstreamFailure(str(e).strip() or e.__class__.__name__) from e
    finally:
        if conn:
            release_db_connection(conn)
