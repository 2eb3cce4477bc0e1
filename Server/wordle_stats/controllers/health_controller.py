"""
Health Controller

Unauthenticated liveness endpoint.
"""

from flask import Blueprint, request, jsonify, current_app
from ..utils.stats_logger import stats_logger

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        stats_logger.log_user_action(request, 'health_check')

        stats_service = current_app.extensions.get('stats_service')
        response_data = {
            'status': 'healthy',
            'stats_available': stats_service is not None,
            'store': type(stats_service.store).__name__ if stats_service else None,
            'auth_available': current_app.extensions.get('token_service') is not None,
            'log_stats': stats_logger.get_log_stats()
        }

        stats_logger.log_server_response(request, 'health_check', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        stats_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        stats_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
