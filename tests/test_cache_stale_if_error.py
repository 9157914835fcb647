import pytest

from safetravel.core.cache import FileCache


def test_file_cache_stale_if_error_returns_expired_value(monkeypatch, tmp_path):
    cache = FileCache(tmp_path, enabled=True, default_ttl_seconds=1)

    monkeypatch.setattr("safetravel.core.cache.time.time", lambda: 0)
    cache.set("alerts", "k", {"data": [1]}, ttl_seconds=1)

    monkeypatch.setattr("safetravel.core.cache.time.time", lambda: 100)
    assert cache.get("alerts", "k") is None

    def builder():
        raise RuntimeError("upstream down")

    val = cache.get_or_set(
        "alerts",
        "k",
        builder,
        ttl_seconds=1,
        stale_if_error=True,
        stale_predicate=lambda exc: isinstance(exc, RuntimeError),
    )
    assert val == {"data": [1]}


def test_file_cache_stale_if_error_respects_predicate(monkeypatch, tmp_path):
    cache = FileCache(tmp_path, enabled=True, default_ttl_seconds=1)

    monkeypatch.setattr("safetravel.core.cache.time.time", lambda: 0)
    cache.set("alerts", "k", {"data": [1]}, ttl_seconds=1)

    monkeypatch.setattr("safetravel.core.cache.time.time", lambda: 100)

    def builder():
        raise RuntimeError("upstream down")

    with pytest.raises(RuntimeError):
        cache.get_or_set(
            "alerts",
            "k",
            builder,
            ttl_seconds=1,
            stale_if_error=True,
            stale_predicate=lambda exc: isinstance(exc, ValueError),
        )


def test_file_cache_builds_once_within_ttl(tmp_path):
    cache = FileCache(tmp_path, enabled=True, default_ttl_seconds=60)
    calls = []

    def builder():
        calls.append(1)
        return {"n": len(calls)}

    assert cache.get_or_set("alerts", "k", builder) == {"n": 1}
    assert cache.get_or_set("alerts", "k", builder) == {"n": 1}
    assert len(calls) == 1


def test_disabled_cache_always_rebuilds(tmp_path):
    cache = FileCache(tmp_path, enabled=False)
    assert cache.get_or_set("alerts", "k", lambda: 1) == 1
    assert cache.get("alerts", "k") is None
    assert not any(tmp_path.iterdir())
