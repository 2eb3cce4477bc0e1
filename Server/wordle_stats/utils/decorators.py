"""
Authentication Decorators

Contains the decorator guarding protected HTTP endpoints.
"""

from functools import wraps
from flask import request, jsonify, current_app


def require_auth(f):
    """
    Decorator to require a verified bearer token.

    A missing token is answered with 401, a token that fails verification
    with 403. On success the identity is available as ``request.identity``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token_service = current_app.extensions.get('token_service')
        if not token_service:
            return jsonify({
                'success': False,
                'error': 'Authentication service unavailable'
            }), 500

        # Get token from Authorization header
        auth_header = request.headers.get('Authorization') or ''
        token = auth_header[len('Bearer '):].strip() if auth_header.startswith('Bearer ') else ''
        if not token:
            return jsonify({
                'success': False,
                'error': 'Authorization token required'
            }), 401

        # Verify token
        result = token_service.verify_token(token)
        if not result['success']:
            return jsonify({
                'success': False,
                'error': result['error']
            }), 403

        request.identity = result['identity']
        return f(*args, **kwargs)

    return decorated_function
