from __future__ import annotations

import json
import logging
from dataclasses import dataclass
import os
from pathlib import Path

from music_lyric.api.types import OutputFilenameType, SearchSource

logger = logging.getLogger(__name__)

_LANGS = ("EN", "ZH")
_CACHE_BACKENDS = ("memory", "sqlite")


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "music-lyric"
    return Path.home() / ".config" / "music-lyric"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    # Storage
    data_dir: Path
    cache_db_path: Path
    config_dir: Path
    cache_backend: str  # memory | sqlite

    # Locale
    lang: str

    # Providers
    search_source: SearchSource
    http_timeout_s: float
    api_max_retries: int
    api_backoff_base_s: float

    # Output
    output_filename_type: OutputFilenameType


def load_config() -> AppConfig:
    # XDG base dir fallback
    xdg = os.getenv("XDG_CACHE_HOME")
    data_dir = Path(xdg) if xdg else Path.home() / ".cache"
    data_dir = data_dir / "music-lyric"

    cache_backend = os.getenv("MUSIC_LYRIC_CACHE", "memory").strip().lower()
    if cache_backend not in _CACHE_BACKENDS:
        logger.info("Unknown cache backend '%s', using memory", cache_backend)
        cache_backend = "memory"

    config_dir = _config_dir()

    return AppConfig(
        data_dir=data_dir,
        cache_db_path=data_dir / "cache.sqlite3",
        config_dir=config_dir,
        cache_backend=cache_backend,
        lang=_load_lang(config_dir),
        search_source=_enum_from_env("MUSIC_LYRIC_SOURCE", SearchSource, SearchSource.NET_EASE_MUSIC),
        http_timeout_s=float(os.getenv("MUSIC_LYRIC_HTTP_TIMEOUT", "10.0")),
        api_max_retries=int(os.getenv("MUSIC_LYRIC_API_MAX_RETRIES", "3")),
        api_backoff_base_s=float(os.getenv("MUSIC_LYRIC_API_BACKOFF_BASE", "1.0")),
        output_filename_type=_enum_from_env(
            "MUSIC_LYRIC_OUTPUT_NAME", OutputFilenameType, OutputFilenameType.NAME_SINGER
        ),
    )


def _enum_from_env(var: str, enum_cls, default):
    raw = os.getenv(var)
    if not raw:
        return default
    raw = raw.strip()
    for member in enum_cls:
        if raw.upper() == member.name or raw.lower() == member.value:
            return member
    logger.info("Unknown value '%s' for %s, using %s", raw, var, default.name)
    return default


def _load_lang(config_dir: Path) -> str:
    # Priority: config.json → MUSIC_LYRIC_LANG → "EN"
    cfg_path = config_dir / "config.json"
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
            raw = (data.get("lang") or "en").upper()
            if raw in _LANGS:
                return raw
        except (OSError, ValueError) as e:
            logger.warning("Unreadable config %s: %s", cfg_path, e)
    env_lang = os.getenv("MUSIC_LYRIC_LANG")
    if env_lang and env_lang.upper() in _LANGS:
        return env_lang.upper()
    return "EN"


def save_config_lang(lang: str) -> None:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, str] = {}
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Overwriting unreadable config %s", cfg_path)
    data["lang"] = lang.upper()
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
