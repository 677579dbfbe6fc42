import asyncio
import json
from datetime import datetime, timedelta, timezone

import pytest

from sommelier.core.auth import authenticate
from sommelier.core.session import SessionCache
from sommelier.db.storage import FileKeyValueStore, InMemoryKeyValueStore

KEY = "palate_sommelier_session"


class LockedStore(InMemoryKeyValueStore):
    def get(self, key):
        raise PermissionError(13, "Permission denied", key)


@pytest.fixture
def snapshot(directory):
    return asyncio.run(authenticate(directory, "4821"))


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


def test_no_session_stored(store):
    assert SessionCache(store).load() is None


def test_session_round_trip(store, snapshot):
    cache = SessionCache(store)
    cache.start(snapshot)

    session = cache.load()
    assert session.tenant_id == "palate"
    assert session.display_name == "Palate"
    assert session.menu_data.menu == snapshot.menu


def test_stored_layout_uses_session_keys(store, snapshot):
    SessionCache(store).start(snapshot)
    payload = json.loads(store.get(KEY))
    assert payload["tenantId"] == "palate"
    assert payload["restaurantName"] == "Palate"
    assert payload["menuData"]["menu"][0]["category"] == "Starters"


def test_save_overwrites(store, snapshot, directory):
    cache = SessionCache(store)
    cache.start(snapshot)
    cache.start(asyncio.run(authenticate(directory, "7310")))
    assert cache.load().tenant_id == "harbour"


def test_logout_clears(store, snapshot):
    cache = SessionCache(store)
    cache.start(snapshot)
    cache.clear()
    assert cache.load() is None
    assert store.get(KEY) is None


def _tamper(store, mutate):
    payload = json.loads(store.get(KEY))
    mutate(payload)
    store.set(KEY, json.dumps(payload).encode("utf-8"))


@pytest.mark.parametrize("mutate", [
    lambda p: p["menuData"].update(menu={"Starters": []}),
    lambda p: p["menuData"].update(menu="Starters"),
    lambda p: p.pop("menuData"),
    lambda p: p.update(menuData=[]),
    lambda p: p["menuData"]["menu"][0]["items"][0]["pairings"].pop("exclusive"),
    lambda p: p.pop("tenantId"),
])
def test_corrupted_session_is_purged(store, snapshot, mutate):
    cache = SessionCache(store)
    cache.start(snapshot)
    _tamper(store, mutate)

    assert cache.load() is None
    assert store.get(KEY) is None


@pytest.mark.parametrize("raw", [b"{not json", b"\xff\xfe", b"[]", b"null"])
def test_unreadable_session_is_purged(store, raw):
    store.set(KEY, raw)
    assert SessionCache(store).load() is None
    assert store.get(KEY) is None


def test_sessions_do_not_expire_by_default(store, snapshot):
    cache = SessionCache(store)
    cache.start(snapshot)
    _tamper(store, lambda p: p.update(savedAt="2001-01-01T00:00:00+00:00"))
    assert cache.load() is not None


def test_expired_session_is_cleared_when_ttl_set(store, snapshot):
    cache = SessionCache(store, ttl_seconds=60)
    cache.start(snapshot)
    assert cache.load() is not None

    old = (datetime.now(timezone.utc) - timedelta(minutes=5)).isoformat()
    _tamper(store, lambda p: p.update(savedAt=old))
    assert cache.load() is None
    assert store.get(KEY) is None


def test_file_store_survives_new_instances(tmp_path, snapshot):
    SessionCache(FileKeyValueStore(str(tmp_path))).start(snapshot)

    reopened = SessionCache(FileKeyValueStore(str(tmp_path)))
    assert reopened.load().tenant_id == "palate"

    reopened.clear()
    assert SessionCache(FileKeyValueStore(str(tmp_path))).load() is None


def test_unreadable_store_is_no_session(snapshot):
    store = LockedStore()
    cache = SessionCache(store)
    cache.start(snapshot)

    assert cache.load() is None


def test_file_store_read_error_is_no_session(tmp_path):
    (tmp_path / KEY).mkdir()
    assert SessionCache(FileKeyValueStore(str(tmp_path))).load() is None
