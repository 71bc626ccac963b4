# tests/test_sessions.py
from healthcare.core.auth import Caller, create_access_token
from healthcare.core.middleware import (
    Unresolved,
    ViaSession,
    ViaToken,
    bearer_token,
    resolve_caller,
)
from healthcare.core.sessions import SessionStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


ALICE = Caller(id=1, email="alice@x.com")
BOB = Caller(id=2, email="bob@x.com")


def test_session_lifecycle():
    store = SessionStore(ttl_seconds=60)
    sid = store.create(ALICE)

    assert store.get(sid) == ALICE
    assert store.destroy(sid) is True
    assert store.get(sid) is None
    # destroying again is harmless
    assert store.destroy(sid) is False
    assert store.destroy(None) is False


def test_session_ids_are_unique_and_opaque():
    store = SessionStore(ttl_seconds=60)
    ids = {store.create(ALICE) for _ in range(50)}
    assert len(ids) == 50
    assert all(len(sid) >= 32 for sid in ids)


def test_expired_session_is_dropped_on_read():
    clock = FakeClock()
    store = SessionStore(ttl_seconds=60, clock=clock)
    sid = store.create(ALICE)

    clock.now += 59
    assert store.get(sid) == ALICE
    clock.now += 2
    assert store.get(sid) is None
    assert len(store) == 0


def test_prune_removes_only_expired_sessions():
    clock = FakeClock()
    store = SessionStore(ttl_seconds=60, clock=clock)
    old = store.create(ALICE)
    clock.now += 30
    fresh = store.create(BOB)
    clock.now += 31

    assert store.prune() == 1
    assert store.get(old) is None
    assert store.get(fresh) == BOB


def test_bearer_token_parsing():
    assert bearer_token(None) is None
    assert bearer_token("") is None
    assert bearer_token("Basic dXNlcjpwYXNz") is None
    assert bearer_token("Bearer abc.def") == "abc.def"
    assert bearer_token("bearer abc.def") == "abc.def"
    assert bearer_token("Bearer ") == ""


def test_valid_token_resolves_via_token():
    store = SessionStore(ttl_seconds=60)
    token = create_access_token(ALICE.id, ALICE.email)

    resolution = resolve_caller(f"Bearer {token}", None, store)
    assert resolution == ViaToken(ALICE)


def test_token_takes_precedence_over_session():
    store = SessionStore(ttl_seconds=60)
    sid = store.create(BOB)
    token = create_access_token(ALICE.id, ALICE.email)

    resolution = resolve_caller(f"Bearer {token}", sid, store)
    assert isinstance(resolution, ViaToken)
    assert resolution.caller == ALICE


def test_invalid_token_never_falls_back_to_session():
    store = SessionStore(ttl_seconds=60)
    sid = store.create(ALICE)

    for header in ["Bearer garbage", "Bearer ", f"Bearer {create_access_token(1, 'a@x.com', secret_key='nope')}"]:
        assert resolve_caller(header, sid, store) == Unresolved(token_rejected=True)


def test_session_used_when_no_bearer_header():
    store = SessionStore(ttl_seconds=60)
    sid = store.create(ALICE)

    assert resolve_caller(None, sid, store) == ViaSession(ALICE, sid)
    # a non-bearer Authorization header does not count as a token
    assert resolve_caller("Basic dXNlcjpwYXNz", sid, store) == ViaSession(ALICE, sid)


def test_nothing_resolves_to_unresolved():
    store = SessionStore(ttl_seconds=60)
    assert resolve_caller(None, None, store) == Unresolved()
    assert resolve_caller(None, "unknown-session", store) == Unresolved()


def test_len_counts_live_entries_until_pruned():
    clock = FakeClock()
    store = SessionStore(ttl_seconds=60, clock=clock)
    store.create(ALICE)
    store.create(BOB)
    assert len(store) == 2

    clock.now += 61
    store.prune()
    assert len(store) == 0
