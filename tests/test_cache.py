"""SQLite key-value cache"""

import re

from core.cache import CacheStore
from core.dates import get_local_date


class TestCacheStore:
    def test_set_get_delete(self, cache):
        assert cache.get("theme") is None
        assert cache.set("theme", "dark") is True
        assert cache.get("theme") == "dark"
        assert cache.delete("theme") is True
        assert cache.get("theme", "light") == "light"

    def test_overwrite(self, cache):
        cache.set("k", "1")
        cache.set("k", "2")
        assert cache.get("k") == "2"
        assert cache.keys() == ["k"]

    def test_list_round_trip_keeps_unicode(self, cache):
        items = [{"id": "1", "thought": "café ☕"}]
        cache.write_list("aj26_ideas", items)
        assert cache.read_list("aj26_ideas") == items

    def test_missing_list_is_empty(self, cache):
        assert cache.read_list("aj26_todos") == []

    def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "shared.db")
        CacheStore(path).set("theme", "dark")
        assert CacheStore(path).get("theme") == "dark"

    def test_clear(self, cache):
        cache.set("a", "1")
        cache.set("b", "2")
        cache.clear()
        assert cache.keys() == []

    def test_updated_at_is_local_time(self, cache):
        assert cache.updated_at("theme") is None

        cache.set("theme", "dark")

        stamp = cache.updated_at("theme")
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}", stamp)
        assert stamp.startswith(get_local_date())


def test_default_location_follows_configuration():
    from config.loader import get_config

    store = CacheStore()

    assert store.db_path == str(get_config().get("storage.cache_path"))
