from __future__ import annotations

import dataclasses
import json
import logging
import sqlite3
import threading
import time
from pathlib import Path

from music_lyric.api.types import LyricVo, SongVo

logger = logging.getLogger(__name__)

_TABLES = ("album_song_ids", "songs", "lyrics")


class SqliteCache:
    """Same three namespaces as ``MemoryCache``, persisted in a SQLite file.

    Payloads are stored as JSON, so entries survive restarts.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        con = sqlite3.connect(self.db_path)
        con.row_factory = sqlite3.Row
        return con

    def _init_db(self) -> None:
        with self._connect() as con:
            for table in _TABLES:
                con.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {table} (
                        key TEXT PRIMARY KEY,
                        payload TEXT NOT NULL,
                        updated_at INTEGER NOT NULL
                    );
                    """
                )

    def _contains(self, table: str, key: str) -> bool:
        with self._lock, self._connect() as con:
            row = con.execute(f"SELECT 1 FROM {table} WHERE key=?", (key,)).fetchone()
            return row is not None

    def _get(self, table: str, key: str):
        with self._lock, self._connect() as con:
            row = con.execute(f"SELECT payload FROM {table} WHERE key=?", (key,)).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["payload"])
        except ValueError as e:
            logger.warning("Corrupt %s cache entry '%s': %s", table, key, e)
            return None

    def _put(self, table: str, key: str, payload: object) -> None:
        now = int(time.time())
        with self._lock, self._connect() as con:
            con.execute(
                f"""
                INSERT INTO {table}(key, payload, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    payload=excluded.payload,
                    updated_at=excluded.updated_at
                """,
                (key, json.dumps(payload, ensure_ascii=False), now),
            )

    def contains_album_song_ids(self, album_id: str) -> bool:
        return self._contains("album_song_ids", album_id)

    def get_song_ids_from_album(self, album_id: str) -> list[str] | None:
        data = self._get("album_song_ids", album_id)
        return [str(x) for x in data] if data is not None else None

    def put_album_song_ids(self, album_id: str, song_ids: list[str]) -> None:
        self._put("album_song_ids", album_id, list(song_ids))

    def contains_song(self, song_id: str) -> bool:
        return self._contains("songs", song_id)

    def get_song(self, song_id: str) -> SongVo | None:
        data = self._get("songs", song_id)
        return SongVo(**data) if data is not None else None

    def put_song(self, song_id: str, song: SongVo) -> None:
        self._put("songs", song_id, dataclasses.asdict(song))

    def contains_lyric(self, key: str) -> bool:
        return self._contains("lyrics", key)

    def get_lyric(self, key: str) -> LyricVo | None:
        data = self._get("lyrics", key)
        return LyricVo(**data) if data is not None else None

    def put_lyric(self, key: str, lyric: LyricVo) -> None:
        self._put("lyrics", key, dataclasses.asdict(lyric))

    def clear(self) -> None:
        with self._lock, self._connect() as con:
            for table in _TABLES:
                con.execute(f"DELETE FROM {table}")
