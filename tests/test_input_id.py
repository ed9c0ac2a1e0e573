from __future__ import annotations

import pytest
import requests

from music_lyric.api.types import SearchParam, SearchSource, SearchType
from music_lyric.errors import InputIdInvalidError
from music_lyric.utils.input_id import check_input_id, check_num, resolve_input

QQ_SHORT_LINK = "https://c6.y.qq.com/base/fcgi-bin/u?__=AbCdEf"


def _ssr_page(payload: str) -> str:
    return (
        "<html><head><script>var x = 1;</script>"
        f"<script>window.__ssrFirstPageData__ ={payload}</script>"
        "</head></html>"
    )


def _no_network(url: str) -> str:
    raise AssertionError(f"unexpected fetch of {url}")


@pytest.mark.parametrize(
    "value, source, search_type, expected_id",
    [
        ("https://music.163.com/song?id=12345", SearchSource.NET_EASE_MUSIC, SearchType.SONG_ID, "12345"),
        ("https://music.163.com/#/song?id=12345&userid=9", SearchSource.NET_EASE_MUSIC, SearchType.SONG_ID, "12345"),
        ("https://music.163.com/#/album?id=777", SearchSource.NET_EASE_MUSIC, SearchType.ALBUM_ID, "777"),
        ("https://music.163.com/playlist?id=42", SearchSource.NET_EASE_MUSIC, SearchType.PLAYLIST_ID, "42"),
        ("https://y.qq.com/n/ryqq/songDetail/001g0Dcb0nxHiP", SearchSource.QQ_MUSIC, SearchType.SONG_ID, "001g0Dcb0nxHiP"),
        ("https://y.qq.com/n/ryqq/albumDetail/003rytri2FHG3V?x=1", SearchSource.QQ_MUSIC, SearchType.ALBUM_ID, "003rytri2FHG3V"),
    ],
)
def test_resolve_urls(value, source, search_type, expected_id):
    r = resolve_input(value, fetch_html=_no_network)
    assert (r.search_source, r.search_type, r.resource_id) == (source, search_type, expected_id)


def test_raw_digits_with_netease_preset():
    param = SearchParam(search_source=SearchSource.NET_EASE_MUSIC)
    assert check_input_id("12345", param) == "12345"
    assert param.search_source is SearchSource.NET_EASE_MUSIC
    assert param.search_type is SearchType.SONG_ID


def test_raw_alphanumeric_with_qq_preset():
    param = SearchParam(search_source=SearchSource.QQ_MUSIC, search_type=SearchType.ALBUM_ID)
    assert check_input_id("003rytri2FHG3V", param) == "003rytri2FHG3V"
    assert param.search_type is SearchType.ALBUM_ID


def test_alphanumeric_rejected_for_netease():
    with pytest.raises(InputIdInvalidError):
        resolve_input("abc123", search_source=SearchSource.NET_EASE_MUSIC)


@pytest.mark.parametrize("value", ["", "   "])
def test_empty_input_rejected(value):
    with pytest.raises(InputIdInvalidError):
        resolve_input(value)


def test_keyword_without_id_rejected():
    with pytest.raises(InputIdInvalidError):
        resolve_input("https://music.163.com/song?id=")


def test_last_matching_source_keyword_wins():
    # both "163.com" and "qq.com" present: QQ is checked last
    r = resolve_input("https://y.qq.com/n/ryqq/songDetail/abc?from=music.163.com", fetch_html=_no_network)
    assert r.search_source is SearchSource.QQ_MUSIC
    assert r.resource_id == "abc"


def test_last_matching_type_keyword_wins():
    # "playlist?id=" is declared after "song?id="
    r = resolve_input("https://music.163.com/playlist?id=5&song?id=6")
    assert r.search_type is SearchType.PLAYLIST_ID
    assert r.resource_id == "5"


def test_unicode_letters_are_part_of_the_id_run():
    r = resolve_input("https://y.qq.com/n/ryqq/songDetail/ab中文1-rest")
    assert r.resource_id == "ab中文1"


def test_qq_short_link_resolved_from_page():
    page = _ssr_page('{"songList": [{"id": 102065756, "mid": "001g0Dcb0nxHiP"}]}')
    fetched: list[str] = []

    def fake_fetch(url: str) -> str:
        fetched.append(url)
        return page

    r = resolve_input(QQ_SHORT_LINK, fetch_html=fake_fetch)

    assert fetched == [QQ_SHORT_LINK]
    assert r.search_source is SearchSource.QQ_MUSIC
    assert r.resource_id == "102065756"


@pytest.mark.parametrize(
    "page",
    [
        "<html>nothing here</html>",
        _ssr_page("{not json"),
        _ssr_page('{"songList": []}'),
        _ssr_page('{"other": 1}'),
        _ssr_page('{"songList": [{"id": null}]}'),
        _ssr_page('{"songList": [{"id": ""}]}'),
        "<script>window.__ssrFirstPageData__ = {}",
    ],
)
def test_qq_short_link_failures_raise_invalid(page):
    with pytest.raises(InputIdInvalidError):
        resolve_input(QQ_SHORT_LINK, fetch_html=lambda url: page)


def test_qq_short_link_network_error_raises_invalid():
    def broken(url: str) -> str:
        raise requests.ConnectionError("down")

    with pytest.raises(InputIdInvalidError):
        resolve_input(QQ_SHORT_LINK, fetch_html=broken)


def test_short_link_only_fetched_for_qq():
    with pytest.raises(InputIdInvalidError):
        resolve_input("https://music.163.com/fcgi-bin/u?x", fetch_html=_no_network)


def test_check_num():
    assert check_num("0123")
    assert not check_num("")
    assert not check_num("12a")
    assert not check_num("١٢٣")  # non-ASCII digits
