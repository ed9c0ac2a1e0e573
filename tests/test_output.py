import pytest

from music_lyric.api.types import OutputFilenameType, SongVo
from music_lyric.errors import SystemFailureError
from music_lyric.utils.output import format_date, get_output_name, get_safe_filename


def test_safe_filename_replaces_reserved_chars():
    assert get_safe_filename("A:B*C") == "A-B∗C"
    assert get_safe_filename('a"b<c>d|e') == "a''b˂c˃d∣e"
    assert get_safe_filename("AC/DC\\live") == "AC⁄DC⁄live"
    assert get_safe_filename("why?\0\f") == "why"
    assert get_safe_filename("a\tb\nc\rd\ve") == "a b c d e"
    assert get_safe_filename("bell\x07") == "bell_"


def test_safe_filename_is_pure_and_keeps_clean_names():
    assert get_safe_filename("晴天 - 周杰伦") == "晴天 - 周杰伦"
    assert get_safe_filename("A:B") == get_safe_filename("A:B")


def test_safe_filename_rejects_none():
    with pytest.raises(ValueError):
        get_safe_filename(None)


@pytest.mark.parametrize(
    "filename_type, expected",
    [
        (OutputFilenameType.NAME_SINGER, "Re- Start - Foo⁄Bar"),
        (OutputFilenameType.SINGER_NAME, "Foo⁄Bar - Re- Start"),
        (OutputFilenameType.NAME, "Re- Start"),
    ],
)
def test_output_name(filename_type, expected):
    song = SongVo(id="1", display_id="1", name="Re: Start", singer="Foo/Bar")
    assert get_output_name(song, filename_type) == expected


def test_output_name_unknown_type_is_system_failure():
    song = SongVo(id="1", display_id="1", name="n", singer="s")
    with pytest.raises(SystemFailureError):
        get_output_name(song, "bogus")


def test_output_name_requires_song():
    with pytest.raises(ValueError):
        get_output_name(None, OutputFilenameType.NAME)


def test_format_date_is_utc_plus_8():
    assert format_date(0) == "1970-01-01 08:00:00"
    assert format_date(1_600_000_000_000) == "2020-09-13 20:26:40"
