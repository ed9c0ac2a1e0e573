from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class SearchSource(Enum):
    # Declaration order matters: input detection iterates in this order.
    NET_EASE_MUSIC = "netease"
    QQ_MUSIC = "qqmusic"


class SearchType(Enum):
    SONG_ID = "song"
    ALBUM_ID = "album"
    PLAYLIST_ID = "playlist"


class OutputFilenameType(Enum):
    NAME_SINGER = "name_singer"
    SINGER_NAME = "singer_name"
    NAME = "name"


@dataclass(frozen=True, slots=True)
class SongVo:
    id: str
    display_id: str
    name: str
    singer: str
    album: str = ""
    pics: str = ""
    duration_ms: int = 0


@dataclass(frozen=True, slots=True)
class LyricVo:
    lyric: str
    translate_lyric: str = ""
    transliteration_lyric: str = ""
    verbatim: bool = False
    source: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.lyric.strip()


@dataclass(frozen=True, slots=True)
class ResultVo(Generic[T]):
    """Outcome of a single fetch: either ``data`` or an ``error_msg``."""

    data: T | None = None
    error_msg: str | None = None

    def is_success(self) -> bool:
        return self.error_msg is None and self.data is not None

    @classmethod
    def failure(cls, error_msg: str) -> "ResultVo[T]":
        return cls(data=None, error_msg=error_msg)


@dataclass(slots=True)
class SearchParam:
    """Mutable search selection; input detection overwrites what it recognizes."""

    search_source: SearchSource = SearchSource.NET_EASE_MUSIC
    search_type: SearchType = SearchType.SONG_ID


@dataclass(frozen=True, slots=True)
class ResolvedInput:
    search_source: SearchSource
    search_type: SearchType
    resource_id: str

    @property
    def display(self) -> str:
        return f"{self.search_source.name}/{self.search_type.name}/{self.resource_id}"
