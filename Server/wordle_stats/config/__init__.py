"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- stats_rules.py: Game rules that shape the stats record (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .stats_rules import MAX_ATTEMPTS, ATTEMPT_RANGE, is_valid_attempt_count, bucket_field

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Stats rules
    'MAX_ATTEMPTS', 'ATTEMPT_RANGE', 'is_valid_attempt_count', 'bucket_field'
]
