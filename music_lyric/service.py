from __future__ import annotations

import logging
from dataclasses import dataclass

from music_lyric.api.base import CacheableMusicApi
from music_lyric.api.factory import build_api
from music_lyric.api.types import LyricVo, ResolvedInput, ResultVo, SearchSource, SearchType, SongVo
from music_lyric.cache import MusicCache, build_cache
from music_lyric.config import AppConfig
from music_lyric.errors import UnsupportedSearchTypeError
from music_lyric.utils.input_id import HtmlFetcher, requests_html_fetcher, resolve_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SongLyric:
    song_id: str
    song: SongVo | None
    lyric: LyricVo | None
    error_msg: str | None = None


class MusicLyricService:
    """Input string -> resolved id -> cached provider lookups."""

    def __init__(
        self,
        cfg: AppConfig,
        *,
        cache: MusicCache | None = None,
        fetch_html: HtmlFetcher | None = None,
    ):
        self.cfg = cfg
        self.cache = cache if cache is not None else build_cache(cfg.cache_backend, cfg.cache_db_path)
        self.fetch_html = fetch_html or requests_html_fetcher(cfg.http_timeout_s)
        self._apis: dict[SearchSource, CacheableMusicApi] = {}

    def api(self, source: SearchSource) -> CacheableMusicApi:
        if source not in self._apis:
            self._apis[source] = build_api(source, self.cfg, self.cache)
        return self._apis[source]

    def resolve(self, input_str: str, *, search_type: SearchType = SearchType.SONG_ID) -> ResolvedInput:
        resolved = resolve_input(
            input_str.strip(),
            search_source=self.cfg.search_source,
            search_type=search_type,
            fetch_html=self.fetch_html,
        )
        logger.debug("Resolved %r -> %s", input_str, resolved.display)
        return resolved

    def song_ids(self, resolved: ResolvedInput) -> list[str] | None:
        if resolved.search_type is SearchType.SONG_ID:
            return [resolved.resource_id]
        if resolved.search_type is SearchType.ALBUM_ID:
            return self.api(resolved.search_source).get_song_ids_from_album(resolved.resource_id)
        raise UnsupportedSearchTypeError(f"Unsupported search type: {resolved.search_type.name}")

    def songs(self, resolved: ResolvedInput) -> dict[str, ResultVo[SongVo]] | None:
        """``None`` when the album listing could not be fetched."""
        ids = self.song_ids(resolved)
        if ids is None:
            return None
        if not ids:
            return {}
        return self.api(resolved.search_source).get_song_vo(ids)

    def lyrics(self, resolved: ResolvedInput, *, verbatim: bool = False) -> list[SongLyric] | None:
        ids = self.song_ids(resolved)
        if ids is None:
            return None
        api = self.api(resolved.search_source)
        songs = api.get_song_vo(ids) if ids else {}

        out: list[SongLyric] = []
        for song_id in ids:
            res = songs.get(song_id)
            if res is None or not res.is_success():
                out.append(SongLyric(song_id, None, None, res.error_msg if res else None))
                continue
            lyric = api.get_lyric_vo(res.data, verbatim)
            out.append(SongLyric(song_id, res.data, lyric))
        return out
