"""
Stats Controller

Handles the per-user statistics HTTP endpoints.
"""

from flask import Blueprint, request, jsonify, current_app
from ..models.results import ErrorKind
from ..models.stats import OutcomeEvent, InvalidOutcomeError
from ..utils.decorators import require_auth
from ..utils.stats_logger import stats_logger

stats_bp = Blueprint('stats', __name__)

ERROR_STATUS_CODES = {
    ErrorKind.STATS_NOT_FOUND.value: 404,
    ErrorKind.NICKNAME_NOT_FOUND.value: 404,
    ErrorKind.INVALID_ARGUMENT.value: 400,
    ErrorKind.CONFLICT.value: 409,
    ErrorKind.STORAGE_FAILURE.value: 500,
}


def _get_stats_service():
    return current_app.extensions.get('stats_service')


def _service_unavailable():
    return jsonify({
        'success': False,
        'error': 'Stats service unavailable'
    }), 500


def _error_response(action, result):
    """Map a failed service result to a ``{"msg": ...}`` response."""
    status_code = ERROR_STATUS_CODES.get(result.get('error_kind'), 500)
    response_data = {'msg': result['message']}
    stats_logger.log_server_response(request, action, False, response_data,
                                     error_kind=result.get('error_kind'))
    return jsonify(response_data), status_code


def _internal_error(action, error):
    stats_logger.log_error(request, error, action)
    error_response = {
        'success': False,
        'error': str(error)
    }
    stats_logger.log_server_response(request, action, False, error_response)
    return jsonify(error_response), 500


@stats_bp.route('/create-stats', methods=['POST'])
@require_auth
def create_stats():
    """Create an empty stats record for the authenticated user."""
    try:
        stats_service = _get_stats_service()
        if not stats_service:
            return _service_unavailable()

        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return _error_response('create_stats', {
                'message': 'Request body must be a JSON object',
                'error_kind': ErrorKind.INVALID_ARGUMENT.value
            })
        total_games = data.get('totalgames', 0)

        stats_logger.log_user_action(request, 'create_stats', totalgames=total_games)

        result = stats_service.create_stats(request.identity, total_games)
        if result.get('error_kind') == ErrorKind.INVALID_ARGUMENT.value:
            return _error_response('create_stats', result)

        # Duplicate and storage failures are reported in the body, not the status code
        response_data = {'status': result['status'], 'message': result['message']}
        stats_logger.log_server_response(request, 'create_stats', result['status'], response_data,
                                         error_kind=result.get('error_kind'))
        return jsonify(response_data)

    except Exception as e:
        return _internal_error('create_stats', e)


@stats_bp.route('/stats', methods=['GET'])
@require_auth
def get_stats():
    """Return the authenticated user's stats with their nickname."""
    try:
        stats_service = _get_stats_service()
        if not stats_service:
            return _service_unavailable()

        stats_logger.log_user_action(request, 'get_stats')

        result = stats_service.get_stats(request.identity)
        if not result['status']:
            return _error_response('get_stats', result)

        stats_logger.log_server_response(request, 'get_stats', True, result['stats'])
        return jsonify(result['stats'])

    except Exception as e:
        return _internal_error('get_stats', e)


@stats_bp.route('/update-stats', methods=['PUT'])
@require_auth
def update_stats():
    """Record a finished game for the authenticated user."""
    try:
        stats_service = _get_stats_service()
        if not stats_service:
            return _service_unavailable()

        data = request.get_json(silent=True)

        stats_logger.log_user_action(request, 'update_stats', payload=data)

        try:
            event = OutcomeEvent.from_payload(data)
        except InvalidOutcomeError as e:
            return _error_response('update_stats', {
                'message': str(e),
                'error_kind': ErrorKind.INVALID_ARGUMENT.value
            })

        result = stats_service.update_stats(request.identity, event)
        if not result['status']:
            return _error_response('update_stats', result)

        response_data = {'status': True, 'message': result['message']}
        stats_logger.log_server_response(request, 'update_stats', True, response_data,
                                         won=event.won, attempts=event.attempts)
        return jsonify(response_data)

    except Exception as e:
        return _internal_error('update_stats', e)
