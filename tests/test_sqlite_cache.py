from __future__ import annotations

from music_lyric.api.types import LyricVo
from music_lyric.cache import MemoryCache, SqliteCache, build_cache
from tests.mocks.fake_api import FakeMusicApi, make_song


def test_entries_survive_a_new_cache_instance(tmp_path):
    db = tmp_path / "nested" / "cache.sqlite3"
    first = FakeMusicApi(SqliteCache(db))
    first.albums["10"] = ["1", "2"]
    first.songs["1"] = make_song("1")
    first.lyrics[("1", True)] = LyricVo(lyric="word", verbatim=True, source="netease")

    first.get_song_ids_from_album("10")
    first.get_song_vo(["1"])
    first.get_lyric_vo(make_song("1"), True)

    second = FakeMusicApi(SqliteCache(db))
    assert second.get_song_ids_from_album("10") == ["1", "2"]
    assert second.get_song_vo(["1"])["1"].data == make_song("1")
    assert second.get_lyric_vo(make_song("1"), True) == LyricVo(lyric="word", verbatim=True, source="netease")
    assert second.album_calls == []
    assert second.song_calls == [[]]
    assert second.lyric_calls == []


def test_missing_keys(tmp_path):
    cache = SqliteCache(tmp_path / "c.sqlite3")
    assert not cache.contains_song("1")
    assert cache.get_song("1") is None
    assert cache.get_lyric("1_False") is None
    assert cache.get_song_ids_from_album("1") is None


def test_clear_empties_all_namespaces(tmp_path):
    cache = SqliteCache(tmp_path / "c.sqlite3")
    cache.put_album_song_ids("10", ["1"])
    cache.put_song("1", make_song("1"))
    cache.put_lyric("1_False", LyricVo(lyric="x"))

    cache.clear()

    assert not cache.contains_album_song_ids("10")
    assert not cache.contains_song("1")
    assert not cache.contains_lyric("1_False")


def test_memory_cache_stats_and_clear():
    cache = MemoryCache()
    cache.put_song("1", make_song("1"))
    cache.put_lyric("1_True", LyricVo(lyric="x"))
    assert cache.stats() == {"album_song_ids": 0, "songs": 1, "lyrics": 1}

    cache.clear()
    assert cache.stats() == {"album_song_ids": 0, "songs": 0, "lyrics": 0}


def test_build_cache_backends(tmp_path):
    assert isinstance(build_cache("memory", tmp_path / "x.sqlite3"), MemoryCache)
    assert isinstance(build_cache("sqlite", tmp_path / "x.sqlite3"), SqliteCache)


def test_failures_are_not_persisted_and_retried_after_restart(tmp_path):
    db = tmp_path / "cache.sqlite3"
    first = FakeMusicApi(SqliteCache(db))

    assert first.get_song_ids_from_album("10") is None
    assert not first.get_song_vo(["1"])["1"].is_success()
    assert first.get_lyric_vo(make_song("1"), False) is None

    second = FakeMusicApi(SqliteCache(db))
    second.albums["10"] = ["1"]
    second.songs["1"] = make_song("1")
    second.lyrics[("1", False)] = LyricVo(lyric="x")

    assert second.get_song_ids_from_album("10") == ["1"]
    assert second.get_song_vo(["1"])["1"].is_success()
    assert second.get_lyric_vo(make_song("1"), False) == LyricVo(lyric="x")
    assert second.album_calls == ["10"]
    assert second.song_calls == [["1"]]
    assert second.lyric_calls == [("1", False)]
