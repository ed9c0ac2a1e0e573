from __future__ import annotations

import json
import logging
from typing import Any

from music_lyric.cache import MusicCache
from music_lyric.errors import ErrorMsg

from .base import CacheableMusicApi
from .http import JsonHttpClient
from .types import LyricVo, ResultVo, SearchSource, SongVo

logger = logging.getLogger(__name__)

BASE_URL = "https://music.163.com/api"


def _ok(data: Any) -> bool:
    return isinstance(data, dict) and data.get("code") == 200


def _lyric_text(data: dict, field: str) -> str:
    return str((data.get(field) or {}).get("lyric") or "")


class NetEaseMusicApi(CacheableMusicApi):
    source = SearchSource.NET_EASE_MUSIC

    def __init__(
        self,
        cache: MusicCache | None = None,
        *,
        timeout_s: float = 10.0,
        max_retries: int = 3,
        backoff_base_s: float = 1.0,
    ):
        super().__init__(cache)
        self.http = JsonHttpClient(
            name="netease",
            timeout_s=timeout_s,
            max_retries=max_retries,
            backoff_base_s=backoff_base_s,
            headers={"Referer": "https://music.163.com/"},
        )

    def _get_song_ids_from_album(self, album_id: str) -> list[str] | None:
        data = self.http.get_json(f"{BASE_URL}/album/{album_id}")
        if not _ok(data):
            return None
        songs = (data.get("album") or {}).get("songs") or data.get("songs") or []
        return [str(s["id"]) for s in songs if "id" in s]

    def _get_song_vo(self, song_ids: list[str]) -> dict[str, ResultVo[SongVo]]:
        if not song_ids:
            return {}

        data = self.http.get_json(
            f"{BASE_URL}/song/detail/",
            params={"ids": json.dumps([int(i) if i.isdigit() else i for i in song_ids])},
        )
        if not _ok(data):
            return {i: ResultVo.failure(ErrorMsg.NETWORK_ERROR.value) for i in song_ids}

        found: dict[str, SongVo] = {}
        for s in data.get("songs") or []:
            vo = self._to_song_vo(s)
            found[vo.id] = vo

        return {
            i: ResultVo(data=found[i]) if i in found else ResultVo.failure(ErrorMsg.SONG_NOT_EXIST.value)
            for i in song_ids
        }

    @staticmethod
    def _to_song_vo(s: dict) -> SongVo:
        song_id = str(s.get("id"))
        album = s.get("album") or s.get("al") or {}
        artists = s.get("artists") or s.get("ar") or []
        return SongVo(
            id=song_id,
            display_id=song_id,
            name=str(s.get("name") or ""),
            singer=",".join(str(a.get("name")) for a in artists if a.get("name")),
            album=str(album.get("name") or ""),
            pics=str(album.get("picUrl") or ""),
            duration_ms=int(s.get("duration") or s.get("dt") or 0),
        )

    def _get_lyric_vo(self, song_vo: SongVo, verbatim: bool) -> LyricVo | None:
        data = self.http.get_json(
            f"{BASE_URL}/song/lyric",
            params={"id": song_vo.id, "lv": -1, "tv": -1, "rv": -1, "yv": -1},
        )
        if not _ok(data):
            return None

        lyric = _lyric_text(data, "lrc")
        yrc = _lyric_text(data, "yrc")
        use_yrc = verbatim and bool(yrc)
        if verbatim and not yrc:
            logger.debug("No verbatim lyric for %s, using line lyric", song_vo.display_id)

        return LyricVo(
            lyric=yrc if use_yrc else lyric,
            translate_lyric=_lyric_text(data, "tlyric"),
            transliteration_lyric=_lyric_text(data, "romalrc"),
            verbatim=use_yrc,
            source=self.source.value,
        )
