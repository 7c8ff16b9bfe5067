import json
from datetime import timedelta

from sitecms.sessions import InMemorySessionStore, RedisSessionStore, build_session_store


class FakeRedis:
    def __init__(self):
        self.values = {}
        self.ttls = {}
        self.closed = False

    def get(self, key):
        return self.values.get(key)

    def setex(self, key, ttl, value):
        self.values[key] = value.encode() if isinstance(value, str) else value
        self.ttls[key] = ttl

    def delete(self, key):
        self.values.pop(key, None)

    def close(self):
        self.closed = True


def test_in_memory_store_expires_idle_entries(clock):
    store = InMemorySessionStore(clock=clock)
    store.set('abc', {'user': 'admin'}, timedelta(seconds=30))

    clock.advance(29)
    assert store.get('abc') == {'user': 'admin'}

    clock.advance(2)
    assert store.get('abc') is None
    assert len(store) == 0


def test_in_memory_store_sweeps_abandoned_entries_on_write(clock):
    store = InMemorySessionStore(clock=clock)
    for n in range(50):
        store.set(f'abandoned-{n}', {'_flashes': [('danger', 'Invalid credentials')]}, timedelta(minutes=5))
    assert len(store) == 50

    clock.advance(10 * 60)
    store.set('fresh', {'user': 'admin'}, timedelta(minutes=5))
    assert len(store) == 1
    assert store.get('fresh') == {'user': 'admin'}


def test_in_memory_store_returns_copies(clock):
    store = InMemorySessionStore(clock=clock)
    store.set('abc', {'user': 'admin'}, timedelta(minutes=1))
    store.get('abc')['user'] = 'someone-else'
    assert store.get('abc') == {'user': 'admin'}


def test_in_memory_store_delete_and_close(clock):
    store = InMemorySessionStore(clock=clock)
    store.set('a', {'x': 1}, timedelta(minutes=1))
    store.set('b', {'x': 2}, timedelta(minutes=1))
    store.delete('a')
    store.delete('missing')
    assert store.get('a') is None
    store.close()
    assert store.get('b') is None


def test_redis_store_round_trip():
    client = FakeRedis()
    store = RedisSessionStore(client, prefix='test:')
    store.set('abc', {'user': 'admin'}, timedelta(days=14))

    assert client.ttls['test:abc'] == 14 * 24 * 60 * 60
    assert json.loads(client.values['test:abc']) == {'user': 'admin'}
    assert store.get('abc') == {'user': 'admin'}

    store.delete('abc')
    assert store.get('abc') is None

    store.close()
    assert client.closed


def test_redis_store_discards_garbage():
    client = FakeRedis()
    client.values['sitecms:session:abc'] = b'not json'
    assert RedisSessionStore(client).get('abc') is None


def test_build_session_store_defaults_to_memory():
    assert isinstance(build_session_store({'SESSION_REDIS_URL': None}), InMemorySessionStore)


def test_build_session_store_uses_redis_url(monkeypatch):
    created = {}

    def fake_from_url(url):
        created['url'] = url
        return FakeRedis()

    monkeypatch.setattr('sitecms.sessions.redis.Redis.from_url', fake_from_url)
    store = build_session_store({'SESSION_REDIS_URL': 'redis://cache:6379/0'})
    assert isinstance(store, RedisSessionStore)
    assert created['url'] == 'redis://cache:6379/0'
