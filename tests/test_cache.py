from types import SimpleNamespace

import pytest

from coach_backend.cache import MemoryInsightCache, SQLiteInsightCache, build_cache
from coach_backend.config import Config, resolve_cache_db
from coach_backend.fallback_log import MemoryFallbackLog, SQLiteFallbackLog
from coach_backend.schemas import FallbackLogEntry, InsightKind, InsightResult


def _result(pattern, source="llm"):
    return InsightResult(
        kind=InsightKind.LEAF,
        fields={"pattern": pattern, "insight": "i", "action": "a", "root_belief": "r"},
        source=source,
    )


@pytest.fixture(params=["memory", "sqlite"])
def cache(request, tmp_path):
    if request.param == "memory":
        return MemoryInsightCache()
    return SQLiteInsightCache(str(tmp_path / "db" / "insights.sqlite"))


def test_put_then_get(cache):
    cache.put("tool3", "alice", "subdomain_1_1", _result("p1"))
    got = cache.get("tool3", "alice", "subdomain_1_1")
    assert got.text("pattern") == "p1"
    assert cache.get("tool3", "alice", "subdomain_1_2") is None


def test_latest_write_wins(cache):
    cache.put("tool3", "alice", "subdomain_1_1", _result("old"))
    cache.put("tool3", "alice", "subdomain_1_1", _result("new", source="fallback"))
    got = cache.get("tool3", "alice", "subdomain_1_1")
    assert got.text("pattern") == "new"
    assert got.source == "fallback"


def test_keys_are_isolated(cache):
    cache.put("tool3", "alice", "subdomain_1_1", _result("alice-3"))
    cache.put("tool3", "bob", "subdomain_1_1", _result("bob-3"))
    cache.put("tool5", "alice", "subdomain_1_1", _result("alice-5"))
    assert cache.get("tool3", "alice", "subdomain_1_1").text("pattern") == "alice-3"
    assert cache.get("tool3", "bob", "subdomain_1_1").text("pattern") == "bob-3"
    assert cache.get("tool5", "alice", "subdomain_1_1").text("pattern") == "alice-5"


def test_clear_only_touches_one_tool_and_student(cache):
    cache.put("tool3", "alice", "subdomain_1_1", _result("a"))
    cache.put("tool3", "alice", "subdomain_2_1", _result("b"))
    cache.put("tool3", "bob", "subdomain_1_1", _result("c"))
    cache.put("tool5", "alice", "subdomain_1_1", _result("d"))
    cache.clear("tool3", "alice")
    assert cache.items("tool3", "alice") == {}
    assert set(cache.items("tool3", "bob")) == {"subdomain_1_1"}
    assert set(cache.items("tool5", "alice")) == {"subdomain_1_1"}


def test_sqlite_cache_persists_across_instances(tmp_path):
    path = str(tmp_path / "insights.sqlite")
    SQLiteInsightCache(path).put("tool7", "carol", "subdomain_2_3", _result("kept"))
    assert SQLiteInsightCache(path).get("tool7", "carol", "subdomain_2_3").text("pattern") == "kept"


def test_sqlite_cache_without_path_stays_in_memory():
    cache = SQLiteInsightCache(None)
    assert cache.backend == "memory"
    cache.put("tool3", "alice", "subdomain_1_1", _result("p"))
    assert cache.get("tool3", "alice", "subdomain_1_1").text("pattern") == "p"


def test_build_cache_follows_config(tmp_path):
    on = SimpleNamespace(store_results=True, cache_db=str(tmp_path / "c.sqlite"))
    off = SimpleNamespace(store_results=False, cache_db=None)
    assert isinstance(build_cache(on), SQLiteInsightCache)
    assert isinstance(build_cache(off), MemoryInsightCache)


def test_default_cache_db_lives_under_results_dir(tmp_path):
    results = tmp_path / "results"
    cfg = Config(results_dir=str(results), cache_db=None, store_results=True)
    cfg.cache_db = resolve_cache_db(cfg)
    assert cfg.cache_db == str(results / "insights.sqlite")
    cache = build_cache(cfg)
    assert isinstance(cache, SQLiteInsightCache)
    assert results.is_dir()

    assert resolve_cache_db(Config(results_dir=str(results), cache_db="  ", store_results=False)) is None
    assert resolve_cache_db(Config(results_dir=str(results), cache_db=" /x/y.sqlite ")) == "/x/y.sqlite"


@pytest.mark.parametrize("make_log", [
    lambda tmp_path: MemoryFallbackLog(),
    lambda tmp_path: SQLiteFallbackLog(str(tmp_path / "log.sqlite")),
])
def test_fallback_log_appends_in_order(make_log, tmp_path):
    log = make_log(tmp_path)
    log.record(FallbackLogEntry(student_id="alice", tool_id="tool3", request_kind=InsightKind.LEAF,
                                item_key="subdomain_1_1", error_message="timeout"))
    log.record(FallbackLogEntry(student_id="alice", tool_id="tool3",
                                request_kind=InsightKind.OVERALL_SYNTHESIS, error_message="bad"))
    entries = log.entries()
    assert [e.request_kind for e in entries] == [InsightKind.LEAF, InsightKind.OVERALL_SYNTHESIS]
    assert entries[0].item_key == "subdomain_1_1"
    assert entries[1].item_key is None
