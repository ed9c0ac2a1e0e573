from __future__ import annotations

from music_lyric.cache import MusicCache
from music_lyric.config import AppConfig
from music_lyric.errors import SystemFailureError

from .base import CacheableMusicApi
from .netease import NetEaseMusicApi
from .qqmusic import QQMusicApi
from .types import SearchSource

_API_CLASSES: dict[SearchSource, type[NetEaseMusicApi] | type[QQMusicApi]] = {
    SearchSource.NET_EASE_MUSIC: NetEaseMusicApi,
    SearchSource.QQ_MUSIC: QQMusicApi,
}


def build_api(source: SearchSource, cfg: AppConfig, cache: MusicCache | None = None) -> CacheableMusicApi:
    api_cls = _API_CLASSES.get(source)
    if api_cls is None:
        raise SystemFailureError(f"No API for search source {source!r}")
    return api_cls(
        cache,
        timeout_s=cfg.http_timeout_s,
        max_retries=cfg.api_max_retries,
        backoff_base_s=cfg.api_backoff_base_s,
    )
