import os
import sys
import tempfile
import datetime
import jwt
import pytest

# Ensure the server root (containing the `wordle_stats` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
SERVER_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if SERVER_ROOT not in sys.path:
    sys.path.insert(0, SERVER_ROOT)

# Keep test logs out of the working tree
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='wordle_stats_logs_'))

from wordle_stats import create_app
from wordle_stats.config import TestingConfig
from wordle_stats.models import UserStats
from wordle_stats.services import (
    InMemoryStatsStore, StaticNicknameResolver, StatsService, TokenService
)

EMAIL = 'test@example.com'
NICKNAME = 'testuser'


def make_token(claims=None, secret=TestingConfig.JWT_SECRET, expires_in=3600):
    payload = {
        'email': EMAIL,
        'exp': datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(seconds=expires_in)
    }
    payload.update(claims or {})
    return jwt.encode(payload, secret, algorithm='HS256')


def seeded_record(identity=EMAIL):
    """Record with 10 games: 6 won, 4 lost, wins [1, 2, 1, 1, 0, 1]."""
    return UserStats(
        identity=identity,
        total_games=10,
        games_won=6,
        games_lost=4,
        wins_by_attempt=[1, 2, 1, 1, 0, 1]
    )


def seed(store, record):
    """Insert a non-zero record directly, bypassing the service's create rules."""
    store.create(record)
    return store.find_by_identity(record.identity)


@pytest.fixture()
def store():
    return InMemoryStatsStore()


@pytest.fixture()
def resolver():
    return StaticNicknameResolver({EMAIL: NICKNAME})


@pytest.fixture()
def stats_service(store, resolver):
    return StatsService(store, resolver, max_update_retries=5)


@pytest.fixture()
def flask_app(stats_service):
    token_service = TokenService(TestingConfig.JWT_SECRET)
    return create_app(TestingConfig, stats_service=stats_service, token_service=token_service)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def auth_headers():
    return {'Authorization': f'Bearer {make_token()}'}
