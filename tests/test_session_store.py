import pytest
from sqlalchemy import func, select

from sessionauth.core.errors import SessionStoreError
from sessionauth.db.session import Base, build_engine, build_sessionmaker
from sessionauth.models.session import SessionRecord
from sessionauth.services.session_store import SessionStore


@pytest.fixture()
def session_factory():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    try:
        yield build_sessionmaker(engine)
    finally:
        engine.dispose()


def _count(session_factory) -> int:
    with session_factory() as db:
        return db.scalar(select(func.count()).select_from(SessionRecord))


def test_save_then_load_returns_attributes(session_factory):
    store = SessionStore(session_factory, max_age=60)
    sid = store.new_id()
    store.save(sid, {"user_id": 1, "messages": ["hi"], "page_count": 3})
    assert store.load(sid) == {"user_id": 1, "messages": ["hi"], "page_count": 3}


def test_save_overwrites_existing_record(session_factory):
    store = SessionStore(session_factory, max_age=60)
    sid = store.new_id()
    store.save(sid, {"page_count": 1})
    store.save(sid, {"page_count": 2})
    assert store.load(sid) == {"page_count": 2}
    assert _count(session_factory) == 1


def test_load_unknown_id_returns_none(session_factory):
    store = SessionStore(session_factory, max_age=60)
    assert store.load("missing") is None


def test_new_ids_are_unique():
    ids = {SessionStore.new_id() for _ in range(50)}
    assert len(ids) == 50


def test_expired_session_is_dropped_on_load(session_factory):
    store = SessionStore(session_factory, max_age=-1)
    sid = store.new_id()
    store.save(sid, {"user_id": 1})
    assert store.load(sid) is None
    assert _count(session_factory) == 0


def test_destroy_removes_session(session_factory):
    store = SessionStore(session_factory, max_age=60)
    sid = store.new_id()
    store.save(sid, {"user_id": 1})
    store.destroy(sid)
    assert store.load(sid) is None
    # Destroying twice is harmless
    store.destroy(sid)


def test_purge_expired_only_removes_stale_sessions(session_factory):
    stale = SessionStore(session_factory, max_age=-1)
    fresh = SessionStore(session_factory, max_age=60)
    stale.save(stale.new_id(), {"a": 1})
    stale.save(stale.new_id(), {"b": 2})
    keep = fresh.new_id()
    fresh.save(keep, {"c": 3})

    assert fresh.purge_expired() == 2
    assert fresh.load(keep) == {"c": 3}


def test_corrupt_payload_is_treated_as_missing(session_factory):
    store = SessionStore(session_factory, max_age=60)
    sid = store.new_id()
    store.save(sid, {"a": 1})
    with session_factory() as db:
        db.get(SessionRecord, sid).data = "{not json"
        db.commit()
    assert store.load(sid) is None


def test_driver_errors_are_wrapped():
    engine = build_engine("sqlite://")  # no tables created
    store = SessionStore(build_sessionmaker(engine), max_age=60)
    with pytest.raises(SessionStoreError):
        store.load("abc")
    with pytest.raises(SessionStoreError):
        store.save("abc", {})
    with pytest.raises(SessionStoreError):
        store.destroy("abc")
