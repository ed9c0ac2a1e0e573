from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from music_lyric.api.types import OutputFilenameType, SongVo
from music_lyric.errors import SystemFailureError

logger = logging.getLogger(__name__)

_CST = timezone(timedelta(hours=8))

# Characters not allowed in file names on common filesystems.
_INVALID_FILENAME_CHARS = frozenset('"<>|:*?\\/') | frozenset(chr(c) for c in range(32))

_REPLACEMENTS = {
    '"': "''",
    "<": "˂",  # '˂' modifier letter left arrowhead
    ">": "˃",  # '˃' modifier letter right arrowhead
    "|": "∣",  # '∣' divides
    ":": "-",
    "*": "∗",  # '∗' asterisk operator
    "\\": "⁄",  # '⁄' fraction slash
    "/": "⁄",
    "\0": "",
    "\f": "",
    "?": "",
    "\t": " ",
    "\n": " ",
    "\r": " ",
    "\v": " ",
}


def get_safe_filename(arbitrary: str) -> str:
    """Replace reserved file name characters with look-alikes. Pure."""
    if arbitrary is None:
        raise ValueError("arbitrary must not be None")
    return "".join(
        _REPLACEMENTS.get(c, "_") if c in _INVALID_FILENAME_CHARS else c for c in arbitrary
    )


def get_output_name(song_vo: SongVo, filename_type: OutputFilenameType) -> str:
    if song_vo is None:
        logger.error("get_output_name called without a song")
        raise ValueError("song_vo must not be None")

    if filename_type is OutputFilenameType.NAME_SINGER:
        output_name = f"{song_vo.name} - {song_vo.singer}"
    elif filename_type is OutputFilenameType.SINGER_NAME:
        output_name = f"{song_vo.singer} - {song_vo.name}"
    elif filename_type is OutputFilenameType.NAME:
        output_name = song_vo.name
    else:
        raise SystemFailureError(f"Unknown output filename type: {filename_type!r}")

    return get_safe_filename(output_name)


def format_date(millisecond: int) -> str:
    """Epoch milliseconds -> 'YYYY-MM-DD HH:MM:SS' in UTC+8 (provider local time)."""
    date = datetime.fromtimestamp(millisecond / 1000, tz=_CST)
    return date.strftime("%Y-%m-%d %H:%M:%S")
