from flask import Blueprint, current_app, jsonify, request

from liftsignal import store
from liftsignal.app import limiter, logger
from liftsignal.constants import NO_DATA_MESSAGE
from liftsignal.errors import NoDataError, UpstreamFailure
from liftsignal.signals import derive_signals

intelligence_bp = Blueprint('intelligence', __name__)


@intelligence_bp.route('/api/intelligence', methods=['GET'])
@limiter.limit("60 per minute")
def get_intelligence():
    """Training signals for one lift: e1RM series, trend, plateau, fatigue and confidence."""
    lift = request.args.get('lift') or current_app.config['DEFAULT_LIFT_KEY']

    try:
        observations = store.load_observations(lift)
        payload = derive_signals(observations)
    except UpstreamFailure as e:
        logger.error(f"Observation fetch failed for lift '{lift}': {e.message}")
        return jsonify(error=e.message), 500
    except NoDataError:
        logger.info(f"No observations found for lift '{lift}'.")
        return jsonify(error=NO_DATA_MESSAGE), 404

    return jsonify(payload), 200
