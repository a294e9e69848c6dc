"""Tests for the shared cache store and local preferences."""

from chatgraph.cache import CacheStore, history_pagination_key
from chatgraph.preferences import LocalPreferences


class TestCacheStore:
    """Tests for CacheStore."""

    def test_mutate_removes_and_notifies(self):
        cache = CacheStore()
        cache.set("k", 1)
        seen = []
        cache.subscribe("k", seen.append)

        cache.mutate("k")

        assert cache.get("k") is None
        assert seen == ["k"]

    def test_unsubscribe(self):
        cache = CacheStore()
        seen = []
        unsubscribe = cache.subscribe("k", seen.append)

        unsubscribe()
        cache.mutate("k")

        assert seen == []

    def test_failing_subscriber_does_not_block_others(self):
        cache = CacheStore()
        seen = []

        def broken(key):
            raise RuntimeError("nope")

        cache.subscribe("k", broken)
        cache.subscribe("k", seen.append)
        cache.mutate("k")

        assert seen == ["k"]

    def test_pagination_key_is_per_workspace(self):
        assert history_pagination_key("a") != history_pagination_key("b")
        assert "workspaceId=a" in history_pagination_key("a")


class TestLocalPreferences:
    """Tests for LocalPreferences."""

    def test_roundtrip_last_workspace(self, tmp_path):
        prefs = LocalPreferences(tmp_path / "nested" / "prefs.json")
        assert prefs.last_workspace is None

        prefs.last_workspace = "ws-1"

        assert LocalPreferences(tmp_path / "nested" / "prefs.json").last_workspace == "ws-1"

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("{not json")

        assert LocalPreferences(path).last_workspace is None
