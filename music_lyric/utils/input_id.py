from __future__ import annotations

import json
import logging
import re
from typing import Callable

import regex
import requests

from music_lyric.api.types import ResolvedInput, SearchParam, SearchSource, SearchType
from music_lyric.errors import InputIdInvalidError

logger = logging.getLogger(__name__)

HtmlFetcher = Callable[[str], str]

# Iteration order is significant: every matching entry assigns, the last one wins.
SEARCH_SOURCE_KEYWORDS: dict[SearchSource, str] = {
    SearchSource.NET_EASE_MUSIC: "163.com",
    SearchSource.QQ_MUSIC: "qq.com",
}

SEARCH_TYPE_KEYWORDS: dict[SearchSource, dict[SearchType, str]] = {
    SearchSource.NET_EASE_MUSIC: {
        SearchType.SONG_ID: "song?id=",
        SearchType.ALBUM_ID: "album?id=",
        SearchType.PLAYLIST_ID: "playlist?id=",
    },
    SearchSource.QQ_MUSIC: {
        SearchType.SONG_ID: "songDetail/",
        SearchType.ALBUM_ID: "albumDetail/",
        SearchType.PLAYLIST_ID: "playlist/",
    },
}

QQ_SHORT_LINK_KEYWORD = "fcgi-bin/u"
QQ_SSR_DATA_MARKER = "window.__ssrFirstPageData__"

_NUM_RE = re.compile(r"^\d+$", re.ASCII)
_ALNUM_RE = re.compile(r"^[a-zA-Z0-9]*$")
# Unicode letters and decimal digits
_LETTER_OR_DIGIT_RUN = regex.compile(r"[\p{L}\p{Nd}]*")

DEFAULT_SHORT_LINK_TIMEOUT_S = 10.0


def check_num(s: str) -> bool:
    return bool(_NUM_RE.match(s))


def requests_html_fetcher(timeout_s: float = DEFAULT_SHORT_LINK_TIMEOUT_S) -> HtmlFetcher:
    def fetch(url: str) -> str:
        r = requests.get(url, timeout=timeout_s, headers={"User-Agent": "Mozilla/5.0"})
        r.raise_for_status()
        return r.text

    return fetch


def check_input_id(input_str: str, param: SearchParam, *, fetch_html: HtmlFetcher | None = None) -> str:
    """
    Validate user input and extract the resource id.

    ``param`` holds the caller's current source/type and is updated in place
    with whatever the input reveals. Raises ``InputIdInvalidError`` when no
    id can be derived.
    """
    if not input_str or not input_str.strip():
        raise InputIdInvalidError()

    for source, keyword in SEARCH_SOURCE_KEYWORDS.items():
        if keyword in input_str:
            param.search_source = source

    type_keywords = SEARCH_TYPE_KEYWORDS[param.search_source]
    for search_type, keyword in type_keywords.items():
        if keyword in input_str:
            param.search_type = search_type

    # NetEase ids are all digits
    if param.search_source is SearchSource.NET_EASE_MUSIC and check_num(input_str):
        return input_str

    # QQ Music ids are letters + digits
    if param.search_source is SearchSource.QQ_MUSIC and _ALNUM_RE.match(input_str):
        return input_str

    url_keyword = type_keywords[param.search_type]
    index = input_str.find(url_keyword)
    if index != -1:
        tail = input_str[index + len(url_keyword):]
        resource_id = _LETTER_OR_DIGIT_RUN.match(tail).group(0)
        # an empty run is rejected instead of being returned as id ""
        if not resource_id:
            raise InputIdInvalidError(f"Empty id after '{url_keyword}' in {input_str!r}")
        return resource_id

    if param.search_source is SearchSource.QQ_MUSIC and QQ_SHORT_LINK_KEYWORD in input_str:
        fetcher = fetch_html or requests_html_fetcher()
        song_id = _resolve_qq_short_link(input_str, fetcher)
        if song_id:
            return song_id

    raise InputIdInvalidError(f"Unrecognized input: {input_str!r}")


def _resolve_qq_short_link(url: str, fetch_html: HtmlFetcher) -> str | None:
    try:
        html = fetch_html(url)
    except requests.RequestException as e:
        logger.warning("QQ short link fetch failed for %s: %s", url, e)
        return None

    start = html.find(QQ_SSR_DATA_MARKER)
    if start == -1:
        logger.debug("No SSR data marker in %s", url)
        return None
    end = html.find("</script>", start)
    if end == -1:
        return None

    # "window.__ssrFirstPageData__ = {...}" -> drop the "="
    data = html[start + len(QQ_SSR_DATA_MARKER):end].strip()[1:].strip().rstrip(";")
    try:
        obj = json.loads(data)
        songs = obj["songList"]
        if songs:
            song_id = songs[0].get("id")
            return str(song_id) if song_id else None
    except (ValueError, KeyError, TypeError, IndexError, AttributeError) as e:
        logger.warning("Could not parse QQ short link page %s: %s", url, e)
    return None


def resolve_input(
    input_str: str,
    *,
    search_source: SearchSource = SearchSource.NET_EASE_MUSIC,
    search_type: SearchType = SearchType.SONG_ID,
    fetch_html: HtmlFetcher | None = None,
) -> ResolvedInput:
    param = SearchParam(search_source=search_source, search_type=search_type)
    resource_id = check_input_id(input_str, param, fetch_html=fetch_html)
    return ResolvedInput(param.search_source, param.search_type, resource_id)
