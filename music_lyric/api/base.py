from __future__ import annotations

import logging
import threading
import weakref
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterable, Iterator

from music_lyric.cache import MusicCache, default_cache

from .types import LyricVo, ResultVo, SearchSource, SongVo

logger = logging.getLogger(__name__)


def get_song_key(display_id: str, verbatim: bool) -> str:
    # "123_True" / "123_False"; persisted caches depend on this exact form
    return f"{display_id}_{verbatim}"


class _KeyedLocks:
    """One lock per key, created on demand and dropped when nobody holds it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, list] = {}  # key -> [lock, holders]

    @contextmanager
    def hold(self, keys: Iterable[str]) -> Iterator[None]:
        # sorted acquisition order so overlapping batches can't deadlock
        ordered = sorted(set(keys))
        with self._guard:
            entries = []
            for k in ordered:
                entry = self._locks.setdefault(k, [threading.Lock(), 0])
                entry[1] += 1
                entries.append((k, entry))

        acquired: list[threading.Lock] = []
        try:
            for _k, entry in entries:
                entry[0].acquire()
                acquired.append(entry[0])
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            with self._guard:
                for k, entry in entries:
                    entry[1] -= 1
                    if entry[1] == 0:
                        del self._locks[k]


# Locks are shared by every facade on the same cache object.
_INFLIGHT: weakref.WeakKeyDictionary[object, _KeyedLocks] = weakref.WeakKeyDictionary()
_INFLIGHT_GUARD = threading.Lock()


def _inflight_for(cache: MusicCache) -> _KeyedLocks:
    with _INFLIGHT_GUARD:
        locks = _INFLIGHT.get(cache)
        if locks is None:
            locks = _INFLIGHT[cache] = _KeyedLocks()
        return locks


class CacheableMusicApi(ABC):
    """
    Read-through / write-through cache in front of a provider.

    Subclasses implement the three ``_get_*`` fetch hooks; the public methods
    consult the cache first and only store successful results. A failed fetch
    is returned as ``None`` (or a failed ``ResultVo``) and retried next call.
    Concurrent misses on the same key trigger a single fetch, also across
    facades sharing one cache.
    """

    source: SearchSource

    def __init__(self, cache: MusicCache | None = None):
        self.cache = cache if cache is not None else default_cache()
        self._inflight = _inflight_for(self.cache)

    @abstractmethod
    def _get_song_ids_from_album(self, album_id: str) -> list[str] | None:
        raise NotImplementedError

    @abstractmethod
    def _get_song_vo(self, song_ids: list[str]) -> dict[str, ResultVo[SongVo]]:
        """Must accept an empty list and return an empty dict for it."""
        raise NotImplementedError

    @abstractmethod
    def _get_lyric_vo(self, song_vo: SongVo, verbatim: bool) -> LyricVo | None:
        raise NotImplementedError

    def get_song_ids_from_album(self, album_id: str) -> list[str] | None:
        with self._inflight.hold([f"album:{album_id}"]):
            if self.cache.contains_album_song_ids(album_id):
                logger.debug("Cache hit: album %s", album_id)
                return self.cache.get_song_ids_from_album(album_id)

            result = self._get_song_ids_from_album(album_id)
            if result is not None:
                self.cache.put_album_song_ids(album_id, result)
            else:
                logger.debug("Album %s fetch failed, not cached", album_id)
            return result

    def get_song_vo(self, song_ids: Iterable[str]) -> dict[str, ResultVo[SongVo]]:
        ids = list(dict.fromkeys(song_ids))
        result: dict[str, ResultVo[SongVo]] = {}

        with self._inflight.hold(f"song:{i}" for i in ids):
            request_ids: list[str] = []
            for song_id in ids:
                cached = self.cache.get_song(song_id) if self.cache.contains_song(song_id) else None
                if cached is not None:
                    result[song_id] = ResultVo(data=cached)
                else:
                    request_ids.append(song_id)

            if request_ids:
                logger.debug("Cache miss: songs %s", request_ids)

            for song_id, result_vo in self._get_song_vo(request_ids).items():
                if result_vo.is_success():
                    self.cache.put_song(song_id, result_vo.data)
                result[song_id] = result_vo

        return result

    def get_lyric_vo(self, song_vo: SongVo, verbatim: bool) -> LyricVo | None:
        cache_key = get_song_key(song_vo.display_id, verbatim)

        with self._inflight.hold([f"lyric:{cache_key}"]):
            if self.cache.contains_lyric(cache_key):
                logger.debug("Cache hit: lyric %s", cache_key)
                return self.cache.get_lyric(cache_key)

            result = self._get_lyric_vo(song_vo, verbatim)
            if result is not None:
                self.cache.put_lyric(cache_key, result)
            return result
