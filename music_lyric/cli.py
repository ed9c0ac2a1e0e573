from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import NoReturn
import typer

from music_lyric.api.types import SearchSource, SearchType
from music_lyric.cache import SqliteCache
from music_lyric.config import load_config, save_config_lang
from music_lyric.errors import MusicLyricError
from music_lyric.i18n import set_lang, t
from music_lyric.logging_setup import setup_logging
from music_lyric.service import MusicLyricService
from music_lyric.utils.output import get_output_name


app = typer.Typer(no_args_is_help=True, add_completion=False)


def _service(source: SearchSource | None, debug: bool) -> MusicLyricService:
    setup_logging(debug)
    cfg = load_config()
    if source is not None:
        cfg = dataclasses.replace(cfg, search_source=source)
    set_lang(cfg.lang)
    return MusicLyricService(cfg)


def _fail(e: MusicLyricError) -> typer.Exit:
    typer.echo(f"{t(e.msg_key.value)} ({e})", err=True)
    return typer.Exit(code=1)


def _album_failed(album_id: str) -> NoReturn:
    typer.echo(t("album_empty", id=album_id), err=True)
    raise typer.Exit(code=1)


@app.command()
def resolve(
    input_str: str = typer.Argument(..., metavar="INPUT", help="Song/album id, URL or short link"),
    source: SearchSource | None = typer.Option(None, "--source", help="Default provider for bare ids"),
    album: bool = typer.Option(False, "--album", help="Treat bare ids as album ids"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Show which provider, type and id an input refers to."""
    svc = _service(source, debug)
    try:
        r = svc.resolve(input_str, search_type=SearchType.ALBUM_ID if album else SearchType.SONG_ID)
    except MusicLyricError as e:
        raise _fail(e)
    typer.echo(t("resolved", source=r.search_source.value, type=r.search_type.value, id=r.resource_id))


@app.command()
def song(
    input_str: str = typer.Argument(..., metavar="INPUT"),
    source: SearchSource | None = typer.Option(None, "--source"),
    album: bool = typer.Option(False, "--album", help="Treat bare ids as album ids"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    debug: bool = typer.Option(False, "--debug"),
):
    """Print song metadata for a song or every song of an album."""
    svc = _service(source, debug)
    try:
        resolved = svc.resolve(input_str, search_type=SearchType.ALBUM_ID if album else SearchType.SONG_ID)
        results = svc.songs(resolved)
    except MusicLyricError as e:
        raise _fail(e)
    if results is None:
        _album_failed(resolved.resource_id)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    song_id: (
                        {
                            "name": r.data.name,
                            "singer": r.data.singer,
                            "album": r.data.album,
                            "duration_ms": r.data.duration_ms,
                        }
                        if r.is_success()
                        else {"error": t(r.error_msg or "system_error")}
                    )
                    for song_id, r in results.items()
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    for song_id, r in results.items():
        if r.is_success():
            typer.echo(f"{song_id}\t{r.data.singer} - {r.data.name}\t{r.data.album}")
        else:
            typer.echo(f"{song_id}\t{t(r.error_msg or 'system_error')}")


@app.command()
def album(
    input_str: str = typer.Argument(..., metavar="INPUT"),
    source: SearchSource | None = typer.Option(None, "--source"),
    debug: bool = typer.Option(False, "--debug"),
):
    """List the song ids of an album."""
    svc = _service(source, debug)
    try:
        resolved = svc.resolve(input_str, search_type=SearchType.ALBUM_ID)
        ids = svc.song_ids(resolved)
    except MusicLyricError as e:
        raise _fail(e)
    if not ids:
        _album_failed(resolved.resource_id)
    for song_id in ids:
        typer.echo(song_id)


@app.command()
def lyric(
    input_str: str = typer.Argument(..., metavar="INPUT"),
    source: SearchSource | None = typer.Option(None, "--source"),
    album: bool = typer.Option(False, "--album", help="Treat bare ids as album ids"),
    verbatim: bool = typer.Option(False, "--verbatim", help="Word-by-word lyric when available"),
    out: Path | None = typer.Option(None, "--out", help="Directory to write .lrc files (default: stdout)"),
    debug: bool = typer.Option(False, "--debug"),
):
    """Fetch lyrics for a song or a whole album."""
    svc = _service(source, debug)
    try:
        resolved = svc.resolve(input_str, search_type=SearchType.ALBUM_ID if album else SearchType.SONG_ID)
        items = svc.lyrics(resolved, verbatim=verbatim)
        if items is None:
            _album_failed(resolved.resource_id)
        failed = 0
        for item in items:
            if item.song is None:
                failed += 1
                typer.echo(f"{item.song_id}: {t(item.error_msg or 'song_not_exist')}", err=True)
                continue
            if item.lyric is None or item.lyric.is_empty:
                failed += 1
                typer.echo(f"{item.song_id}: {t('lrc_not_exist')}", err=True)
                continue

            if out is None:
                typer.echo(item.lyric.lyric)
                continue
            out.mkdir(parents=True, exist_ok=True)
            path = out / f"{get_output_name(item.song, svc.cfg.output_filename_type)}.lrc"
            path.write_text(item.lyric.lyric, encoding="utf-8")
            typer.echo(t("lyric_saved", path=str(path)))
    except MusicLyricError as e:
        raise _fail(e)

    if items and failed == len(items):
        raise typer.Exit(code=1)


@app.command()
def cache(
    clear: bool = typer.Option(False, "--clear", help="Clear the persistent cache"),
):
    """Manage the lookup cache."""
    cfg = load_config()
    set_lang(cfg.lang)
    if not clear:
        typer.echo(t("cache_usage"))
        return
    if cfg.cache_backend != "sqlite":
        typer.echo(t("cache_memory_only"))
        return
    SqliteCache(cfg.cache_db_path).clear()
    typer.echo(t("cache_cleared", path=str(cfg.cache_db_path)))


@app.command()
def config(
    lang: str = typer.Option(..., "--lang", help="Interface language: en|zh"),
):
    """Persist user preferences."""
    if lang.upper() not in ("EN", "ZH"):
        raise typer.BadParameter("lang must be one of: en, zh")
    save_config_lang(lang)
    set_lang(lang)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
