import time

from cityat.core.session_store import SessionStateStore


def test_save_and_load():
    sessions = SessionStateStore(max_age_seconds=60)

    sessions.save("abc", {"cart": {"items": []}})

    assert sessions.load("abc") == {"cart": {"items": []}}
    assert sessions.load("unknown") is None


def test_snapshots_expire(monkeypatch):
    sessions = SessionStateStore(max_age_seconds=60)
    sessions.save("abc", {})

    now = time.monotonic()
    monkeypatch.setattr(time, "monotonic", lambda: now + 61)

    assert sessions.load("abc") is None
    assert len(sessions) == 0


def test_save_drops_expired_sessions(monkeypatch):
    sessions = SessionStateStore(max_age_seconds=60)
    for i in range(50):
        sessions.save(f"old-{i}", {})

    now = time.monotonic()
    monkeypatch.setattr(time, "monotonic", lambda: now + 61)
    sessions.save("new", {})

    assert len(sessions) == 1


def test_new_session_ids_are_unique():
    assert SessionStateStore.new_session_id() != SessionStateStore.new_session_id()
