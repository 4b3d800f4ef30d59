from app.database import InMemoryStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_set_and_get_until_expiry():
    clock = FakeClock()
    store = InMemoryStore(clock=clock)

    store.set("csrf:abc", "token", ttl_seconds=60)
    assert store.get("csrf:abc") == "token"

    clock.now += 61
    assert store.get("csrf:abc") is None
    # La lectura de una entrada expirada la elimina
    assert len(store) == 0

def test_delete_missing_key_is_noop():
    store = InMemoryStore()
    store.delete("nope")
    assert store.get("nope") is None

def test_sweep_removes_only_expired_entries():
    clock = FakeClock()
    store = InMemoryStore(clock=clock)
    store.set("short", 1, ttl_seconds=10)
    store.set("long", 2, ttl_seconds=1000)

    clock.now += 20
    assert store.sweep() == 1
    assert len(store) == 1
    assert store.get("long") == 2
