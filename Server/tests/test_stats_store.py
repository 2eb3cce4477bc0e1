from unittest.mock import MagicMock

import mongomock
import pytest
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from conftest import EMAIL, seeded_record
from wordle_stats.models import OutcomeEvent, UserStats
from wordle_stats.services.stats_service import apply_outcome
from wordle_stats.services import (
    InMemoryStatsStore, MongoStatsStore, MongoNicknameResolver, NicknameLookupError,
    StaticNicknameResolver, StatsService,
    StatsAlreadyExistsError, StatsNotFoundError, StatsStoreError, StaleStatsError
)


def test_in_memory_find_missing_returns_none():
    assert InMemoryStatsStore().find_by_identity(EMAIL) is None


def test_in_memory_returns_copies():
    store = InMemoryStatsStore()
    store.create(seeded_record())

    loaded = store.find_by_identity(EMAIL)
    loaded.wins_by_attempt[0] = 99
    loaded.total_games = 99

    assert store.find_by_identity(EMAIL) == seeded_record()


def test_in_memory_duplicate_create_raises():
    store = InMemoryStatsStore()
    store.create(UserStats(identity=EMAIL))
    with pytest.raises(StatsAlreadyExistsError):
        store.create(seeded_record())
    assert store.find_by_identity(EMAIL).total_games == 0


def test_in_memory_persist_bumps_version_and_rejects_stale():
    store = InMemoryStatsStore()
    store.create(UserStats(identity=EMAIL))

    loaded = store.find_by_identity(EMAIL)
    stale = store.find_by_identity(EMAIL)

    loaded.total_games = loaded.games_lost = 1
    saved = store.persist(loaded)
    assert saved.version == 1

    stale.total_games = stale.games_won = 1
    with pytest.raises(StaleStatsError):
        store.persist(stale)
    assert store.find_by_identity(EMAIL).games_lost == 1


def test_in_memory_persist_missing_record():
    with pytest.raises(StatsNotFoundError):
        InMemoryStatsStore().persist(UserStats(identity=EMAIL))


def test_mongo_create_inserts_document():
    collection = MagicMock()
    stored = MongoStatsStore(collection).create(UserStats(identity=EMAIL))

    collection.insert_one.assert_called_once_with({
        'email': EMAIL, 'totalgames': 0, 'gameswon': 0, 'gameslost': 0,
        'won1': 0, 'won2': 0, 'won3': 0, 'won4': 0, 'won5': 0, 'won6': 0,
        'version': 0
    })
    assert stored.version == 0


def test_mongo_duplicate_key_is_conflict():
    collection = MagicMock()
    collection.insert_one.side_effect = DuplicateKeyError('E11000 duplicate key')

    with pytest.raises(StatsAlreadyExistsError):
        MongoStatsStore(collection).create(UserStats(identity=EMAIL))


def test_mongo_errors_are_wrapped():
    collection = MagicMock()
    collection.find_one.side_effect = ServerSelectionTimeoutError('no servers')

    with pytest.raises(StatsStoreError):
        MongoStatsStore(collection).find_by_identity(EMAIL)


def test_mongo_find_builds_record():
    collection = MagicMock()
    document = seeded_record().to_document()
    document['_id'] = 'abc'
    document['version'] = 4
    collection.find_one.return_value = document

    record = MongoStatsStore(collection).find_by_identity(EMAIL)

    collection.find_one.assert_called_once_with({'email': EMAIL})
    assert record.wins_by_attempt == [1, 2, 1, 1, 0, 1]
    assert record.version == 4


def test_mongo_persist_is_version_guarded():
    collection = MagicMock()
    record = seeded_record()
    record.version = 3
    after = record.to_document()
    after['version'] = 4
    collection.find_one_and_update.return_value = after

    saved = MongoStatsStore(collection).persist(record)

    filter_doc, update_doc = collection.find_one_and_update.call_args[0]
    assert filter_doc == {'email': EMAIL, 'version': 3}
    assert update_doc['$inc'] == {'version': 1}
    assert update_doc['$set']['won2'] == 2
    assert 'email' not in update_doc['$set']
    assert collection.find_one_and_update.call_args[1]['return_document'] == ReturnDocument.AFTER
    assert saved.version == 4


def test_mongo_persist_distinguishes_stale_from_missing():
    collection = MagicMock()
    collection.find_one_and_update.return_value = None

    collection.find_one.return_value = {'_id': 'abc'}
    with pytest.raises(StaleStatsError):
        MongoStatsStore(collection).persist(seeded_record())

    collection.find_one.return_value = None
    with pytest.raises(StatsNotFoundError):
        MongoStatsStore(collection).persist(seeded_record())


def test_mongo_ensure_indexes_is_unique_on_email():
    collection = MagicMock()
    MongoStatsStore(collection).ensure_indexes()
    collection.create_index.assert_called_once_with([('email', 1)], unique=True)


def test_mongo_nickname_resolver():
    collection = MagicMock()
    resolver = MongoNicknameResolver(collection)

    collection.find_one.return_value = {'email': EMAIL, 'nickname': 'testuser'}
    assert resolver.resolve_display_name(EMAIL) == 'testuser'

    collection.find_one.return_value = {'email': EMAIL}
    assert resolver.resolve_display_name(EMAIL) is None

    collection.find_one.return_value = None
    assert resolver.resolve_display_name(EMAIL) is None

    collection.find_one.side_effect = ServerSelectionTimeoutError('no servers')
    with pytest.raises(NicknameLookupError):
        resolver.resolve_display_name(EMAIL)


def test_mongo_persist_first_write_matches_unversioned_documents():
    collection = MagicMock()
    collection.find_one_and_update.return_value = seeded_record().to_document()

    MongoStatsStore(collection).persist(seeded_record())

    filter_doc = collection.find_one_and_update.call_args[0][0]
    assert filter_doc == {
        'email': EMAIL,
        '$or': [{'version': 0}, {'version': {'$exists': False}}]
    }


def test_mongo_update_of_document_without_version_field():
    collection = mongomock.MongoClient().wordle_game.userstats
    legacy = seeded_record().to_view()
    collection.insert_one(legacy)
    service = StatsService(MongoStatsStore(collection), StaticNicknameResolver({EMAIL: 'testuser'}))

    result = service.update_stats(EMAIL, OutcomeEvent(won=True, attempts=3))

    assert result['status'] is True
    document = collection.find_one({'email': EMAIL})
    assert document['totalgames'] == 11
    assert document['gameswon'] == 7
    assert document['won3'] == 2
    assert document['version'] == 1


def test_mongo_stale_write_on_unversioned_document_is_rejected():
    collection = mongomock.MongoClient().wordle_game.userstats
    collection.insert_one(seeded_record().to_view())
    store = MongoStatsStore(collection)

    first = store.find_by_identity(EMAIL)
    second = store.find_by_identity(EMAIL)
    store.persist(apply_outcome(first, OutcomeEvent(won=False, attempts=1)))

    with pytest.raises(StaleStatsError):
        store.persist(apply_outcome(second, OutcomeEvent(won=False, attempts=1)))
    assert collection.find_one({'email': EMAIL})['gameslost'] == 5
