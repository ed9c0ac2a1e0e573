from __future__ import annotations

from enum import Enum


class ErrorMsg(str, Enum):
    # Values are i18n keys, see music_lyric/i18n/*.json
    INPUT_ID_ILLEGAL = "input_id_illegal"
    SYSTEM_ERROR = "system_error"
    SONG_NOT_EXIST = "song_not_exist"
    LRC_NOT_EXIST = "lrc_not_exist"
    NETWORK_ERROR = "network_error"
    UNSUPPORTED_SEARCH_TYPE = "unsupported_search_type"


class MusicLyricError(RuntimeError):
    msg_key: ErrorMsg = ErrorMsg.SYSTEM_ERROR

    def __init__(self, message: str | None = None):
        super().__init__(message or self.msg_key.value)


class InputIdInvalidError(MusicLyricError):
    msg_key = ErrorMsg.INPUT_ID_ILLEGAL


class UnsupportedSearchTypeError(MusicLyricError):
    msg_key = ErrorMsg.UNSUPPORTED_SEARCH_TYPE


class SystemFailureError(MusicLyricError):
    msg_key = ErrorMsg.SYSTEM_ERROR
