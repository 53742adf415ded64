import time

from tscache.item import CacheItem, KeyNotFoundError


def test_key_not_found_message():
    assert str(KeyNotFoundError("missing")) == "key not found"


def test_key_not_found_is_key_error():
    err = KeyNotFoundError("missing")
    assert isinstance(err, KeyError)
    assert err.key == "missing"
    assert str(err) == "key not found"


def test_key_not_found_keeps_key():
    assert KeyNotFoundError("missing").key == "missing"


def test_item_defaults():
    item = CacheItem(key="k")
    assert item.value is None
    assert item.size == 0
    assert item.expire_at is None
    assert item.access_count == 0
    assert item.compressed is False


def test_item_without_expiry_never_expires():
    item = CacheItem(key="k", value=b"v")
    assert item.is_expired(1e12) is False


def test_item_expiry_is_strict():
    item = CacheItem(key="k", value=b"v", expire_at=10.0)
    assert item.is_expired(5.0) is False
    assert item.is_expired(10.0) is False
    assert item.is_expired(10.5) is True


def test_item_expiry_uses_monotonic_clock_by_default():
    past = CacheItem(key="k", expire_at=time.monotonic() - 1.0)
    future = CacheItem(key="k", expire_at=time.monotonic() + 60.0)
    assert past.is_expired() is True
    assert future.is_expired() is False


def test_item_timestamps_are_ordered():
    before = time.monotonic()
    item = CacheItem(key="k")
    after = time.monotonic()
    assert before <= item.created_at <= after
    assert before <= item.access_at <= after