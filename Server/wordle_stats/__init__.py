"""
Wordle Stats Server Application Package

This package records and serves per-user Wordle statistics: games played,
won and lost, and the distribution of wins by number of attempts.
"""

from flask import Flask
from flask_cors import CORS
from .config import Config


def create_app(config_class=Config, stats_service=None, token_service=None):
    """
    Application factory pattern for creating Flask app instances.

    Services are passed in rather than looked up globally so that each app
    (and each test) owns its own collaborators.

    Args:
        config_class: Configuration class to use
        stats_service: StatsService handling the stats endpoints
        token_service: TokenService verifying bearer tokens

    Returns:
        Flask application instance with all extensions initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)

    app.extensions['stats_service'] = stats_service
    app.extensions['token_service'] = token_service

    # Register blueprints
    from .controllers.stats_controller import stats_bp
    from .controllers.health_controller import health_bp

    app.register_blueprint(stats_bp)
    app.register_blueprint(health_bp, url_prefix='/api')

    return app
