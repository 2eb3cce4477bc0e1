"""
Wordle Stats Server - Main Entry Point

This is the main entry point for the Wordle stats server.
It connects to MongoDB, builds the services and starts the Flask application.
"""

from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi
from wordle_stats import create_app
from wordle_stats.config import Config
from wordle_stats.services import (
    InMemoryStatsStore, MongoStatsStore, MongoNicknameResolver, StaticNicknameResolver,
    StatsService, TokenService
)
from wordle_stats.utils.stats_logger import stats_logger


def build_stats_service(config=Config):
    """
    Build the stats service from configuration.

    Uses MongoDB when MONGO_URI is set, otherwise an in-memory store with
    no nicknames (every read reports a missing nickname).

    Returns:
        Tuple of (StatsService, MongoClient or None)
    """
    if not config.MONGO_URI:
        print("✗ MongoDB URI not configured, using in-memory stats store")
        service = StatsService(InMemoryStatsStore(), StaticNicknameResolver(),
                               config.STATS_UPDATE_MAX_RETRIES)
        return service, None

    client = MongoClient(config.MONGO_URI, server_api=ServerApi('1'))
    client.admin.command('ping')
    print("Successfully connected to MongoDB!")

    db = client[config.MONGO_DB_NAME]
    store = MongoStatsStore(db[config.STATS_COLLECTION])
    store.ensure_indexes()
    resolver = MongoNicknameResolver(db[config.USERS_COLLECTION])

    return StatsService(store, resolver, config.STATS_UPDATE_MAX_RETRIES), client


def main():
    """Main function to initialize services and start the server."""
    client = None
    try:
        print("Initializing services...")

        stats_service, client = build_stats_service(Config)
        print("✓ Stats service initialized successfully")

        if Config.JWT_SECRET:
            token_service = TokenService(Config.JWT_SECRET, Config.JWT_ALGORITHM)
            print("✓ Token verification initialized successfully")
        else:
            token_service = None
            print("✗ JWT Secret not configured, protected endpoints will be unavailable")

        print("Creating Flask application...")
        app = create_app(Config, stats_service=stats_service, token_service=token_service)
        print("✓ Flask application created successfully")

        stats_logger.logger.info("Wordle Stats Server Starting")

        print(f"\nStarting Wordle Stats Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print(f"Auth available: {token_service is not None}")
        print("=" * 50)

        app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        stats_logger.logger.info("Wordle Stats Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        stats_logger.logger.error(f"Error starting server: {e}")
        raise
    finally:
        if client is not None:
            client.close()


if __name__ == '__main__':
    main()
