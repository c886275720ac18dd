from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
import psycopg2
import psycopg2.pool
import os
from urllib.parse import urlparse
import logging
import atexit
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from liftsignal.constants import DEFAULT_LIFT_KEY
from liftsignal.errors import UpstreamFailure

app = Flask(__name__)

app.config['DEFAULT_LIFT_KEY'] = os.getenv("DEFAULT_LIFT_KEY", DEFAULT_LIFT_KEY)
app.config['OBSERVATIONS_TABLE'] = os.getenv("OBSERVATIONS_TABLE", "workout_sets")

# --- Rate Limiter Configuration ---
# Point this at Redis in production so limits hold across workers
RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per day", "50 per hour"],
    storage_uri=RATELIMIT_STORAGE_URL,
    strategy="fixed-window",
)
limiter.init_app(app)


# --- Database Connection Pool Configuration ---
MIN_DB_CONNECTIONS = 1
MAX_DB_CONNECTIONS = 10
db_pool = None

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = app.logger


def get_db_connection_params():
    """Determines database connection parameters."""
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        try:
            url = urlparse(database_url)
            return {
                'dbname': url.path[1:],
                'user': url.username,
                'password': url.password,
                'host': url.hostname,
                'port': url.port or 5432
            }
        except ValueError as e:
            logger.error(f"Failed to parse DATABASE_URL: {e}. Falling back to POSTGRES_* vars.")

    return {
        'dbname': os.getenv("POSTGRES_DB"),
        'user': os.getenv("POSTGRES_USER"),
        'password': os.getenv("POSTGRES_PASSWORD"),
        'host': os.getenv("POSTGRES_HOST"),
        'port': os.getenv("POSTGRES_PORT", "5432")
    }


def init_db_pool():
    """Initializes the database connection pool."""
    global db_pool
    if db_pool is None:
        params = get_db_connection_params()
        if not all(params.values()):
            logger.error("Database connection parameters are incomplete. Pool not initialized.")
            return

        logger.info(f"Initializing database connection pool for host '{params.get('host')}' db '{params.get('dbname')}'")
        try:
            db_pool = psycopg2.pool.SimpleConnectionPool(
                MIN_DB_CONNECTIONS,
                MAX_DB_CONNECTIONS,
                **params
            )
        except psycopg2.OperationalError as e:
            # The app still serves /api/health; observation fetches will report the failure
            logger.error(f"Failed to initialize database pool: {e}")
            return
        logger.info("Database connection pool initialized successfully.")


init_db_pool()


@atexit.register
def close_db_pool():
    global db_pool
    if db_pool:
        logger.info("Closing database connection pool.")
        db_pool.closeall()
        db_pool = None


# --- Database Connection Helper ---
def get_db_connection():
    """Gets a connection from the database pool."""
    if db_pool is None:
        logger.error("Database pool is not initialized. Attempting to re-initialize.")
        init_db_pool()
        if db_pool is None:
            logger.critical("Failed to re-initialize database pool. Cannot get connection.")
            raise UpstreamFailure("Database pool not available.")
    try:
        return db_pool.getconn()
    except psycopg2.pool.PoolError as e:
        logger.error(f"Failed to get connection from pool: {e}")
        raise


def release_db_connection(conn):
    """Releases a connection back to the database pool."""
    if db_pool and conn:
        try:
            db_pool.putconn(conn)
        except psycopg2.pool.PoolError as e:
            logger.error(f"Error releasing connection back to pool: {e}")


@app.errorhandler(Exception)
def handle_exception(e):
    """Generic exception handler."""
    if isinstance(e, HTTPException):
        return jsonify(error=e.description), e.code
    app.logger.error(f"Unhandled exception: {e}", exc_info=True)
    if isinstance(e, psycopg2.pool.PoolError):
        return jsonify(error="Database pool error"), 503
    if isinstance(e, psycopg2.OperationalError):
        return jsonify(error="Database connection error"), 503
    return jsonify(error="An internal server error occurred"), 500


# Import blueprints after the pool and limiter exist; they import from this module
from .blueprints.intelligence import intelligence_bp  # noqa: E402
from .blueprints.health import health_bp  # noqa: E402

app.register_blueprint(intelligence_bp)
app.register_blueprint(health_bp)
