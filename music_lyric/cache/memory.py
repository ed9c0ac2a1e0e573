from __future__ import annotations

import logging
import threading
from typing import Protocol

from music_lyric.api.types import LyricVo, SongVo

logger = logging.getLogger(__name__)


class MusicCache(Protocol):
    """Three independent key-value namespaces: album song ids, songs and lyrics.

    ``get_*`` returns ``None`` when the key is absent.
    """

    def contains_album_song_ids(self, album_id: str) -> bool: ...

    def get_song_ids_from_album(self, album_id: str) -> list[str] | None: ...

    def put_album_song_ids(self, album_id: str, song_ids: list[str]) -> None: ...

    def contains_song(self, song_id: str) -> bool: ...

    def get_song(self, song_id: str) -> SongVo | None: ...

    def put_song(self, song_id: str, song: SongVo) -> None: ...

    def contains_lyric(self, key: str) -> bool: ...

    def get_lyric(self, key: str) -> LyricVo | None: ...

    def put_lyric(self, key: str, lyric: LyricVo) -> None: ...

    def clear(self) -> None: ...


class _Namespace:
    def __init__(self, name: str):
        self.name = name
        self._data: dict[str, object] = {}
        self._lock = threading.Lock()

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def get(self, key: str):
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: object) -> None:
        with self._lock:
            self._data[key] = value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class MemoryCache:
    """Process-lifetime cache. No eviction, entries live until ``clear()``."""

    def __init__(self) -> None:
        self._albums = _Namespace("album_song_ids")
        self._songs = _Namespace("songs")
        self._lyrics = _Namespace("lyrics")

    def contains_album_song_ids(self, album_id: str) -> bool:
        return self._albums.contains(album_id)

    def get_song_ids_from_album(self, album_id: str) -> list[str] | None:
        ids = self._albums.get(album_id)
        # hand out a copy so callers can't mutate the cached listing
        return list(ids) if ids is not None else None

    def put_album_song_ids(self, album_id: str, song_ids: list[str]) -> None:
        self._albums.put(album_id, tuple(song_ids))

    def contains_song(self, song_id: str) -> bool:
        return self._songs.contains(song_id)

    def get_song(self, song_id: str) -> SongVo | None:
        return self._songs.get(song_id)

    def put_song(self, song_id: str, song: SongVo) -> None:
        self._songs.put(song_id, song)

    def contains_lyric(self, key: str) -> bool:
        return self._lyrics.contains(key)

    def get_lyric(self, key: str) -> LyricVo | None:
        return self._lyrics.get(key)

    def put_lyric(self, key: str, lyric: LyricVo) -> None:
        self._lyrics.put(key, lyric)

    def clear(self) -> None:
        for ns in (self._albums, self._songs, self._lyrics):
            ns.clear()
        logger.debug("Memory cache cleared")

    def stats(self) -> dict[str, int]:
        return {ns.name: len(ns) for ns in (self._albums, self._songs, self._lyrics)}
