from __future__ import annotations

import logging
from typing import Any

from music_lyric.cache import MusicCache
from music_lyric.errors import ErrorMsg

from .base import CacheableMusicApi
from .http import JsonHttpClient
from .types import LyricVo, ResultVo, SearchSource, SongVo

logger = logging.getLogger(__name__)

BASE_URL = "https://c.y.qq.com"


def _ok(data: Any) -> bool:
    return isinstance(data, dict) and data.get("code", data.get("retcode")) == 0


def _id_param(prefix: str, resource_id: str) -> dict[str, str]:
    # numeric ids and "mid" strings are accepted under different names
    if resource_id.isdigit():
        return {f"{prefix}id": resource_id}
    return {f"{prefix}mid": resource_id}


class QQMusicApi(CacheableMusicApi):
    source = SearchSource.QQ_MUSIC

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
            name="qqmusic",
            timeout_s=timeout_s,
            max_retries=max_retries,
            backoff_base_s=backoff_base_s,
            headers={"Referer": "https://y.qq.com/"},
        )

    def _get_song_ids_from_album(self, album_id: str) -> list[str] | None:
        data = self.http.get_json(
            f"{BASE_URL}/v8/fcg-bin/fcg_v8_album_info_cp.fcg",
            params={**_id_param("album", album_id), "format": "json"},
        )
        if not _ok(data):
            return None
        songs = (data.get("data") or {}).get("list") or []
        return [str(s["songmid"]) for s in songs if s.get("songmid")]

    def _get_song_vo(self, song_ids: list[str]) -> dict[str, ResultVo[SongVo]]:
        # the endpoint takes one song per request
        return {song_id: self._get_single_song(song_id) for song_id in song_ids}

    def _get_single_song(self, song_id: str) -> ResultVo[SongVo]:
        data = self.http.get_json(
            f"{BASE_URL}/v8/fcg-bin/fcg_play_single_song.fcg",
            params={**_id_param("song", song_id), "format": "json"},
        )
        if data is None:
            return ResultVo.failure(ErrorMsg.NETWORK_ERROR.value)
        songs = data.get("data") if _ok(data) else None
        if not songs:
            return ResultVo.failure(ErrorMsg.SONG_NOT_EXIST.value)

        s = songs[0]
        album = s.get("album") or {}
        album_mid = album.get("mid") or ""
        return ResultVo(
            data=SongVo(
                id=str(s.get("id") or song_id),
                display_id=str(s.get("mid") or song_id),
                name=str(s.get("name") or s.get("title") or ""),
                singer=",".join(str(a.get("name")) for a in s.get("singer") or [] if a.get("name")),
                album=str(album.get("name") or ""),
                pics=(
                    f"https://y.qq.com/music/photo_new/T002R800x800M000{album_mid}.jpg"
                    if album_mid
                    else ""
                ),
                duration_ms=int(s.get("interval") or 0) * 1000,
            )
        )

    def _get_lyric_vo(self, song_vo: SongVo, verbatim: bool) -> LyricVo | None:
        if verbatim:
            # verbatim (QRC) lyrics are encrypted; serve the line lyric instead
            logger.debug("Verbatim lyric not supported for QQ Music, using line lyric")

        data = self.http.get_json(
            f"{BASE_URL}/lyric/fcgi-bin/fcg_query_lyric_new.fcg",
            params={"songmid": song_vo.display_id, "format": "json", "nobase64": 1, "g_tk": 5381},
        )
        if not _ok(data):
            return None

        return LyricVo(
            lyric=str(data.get("lyric") or ""),
            translate_lyric=str(data.get("trans") or ""),
            verbatim=False,
            source=self.source.value,
        )
