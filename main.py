
"""
Convenience entrypoint for running from a source checkout.

Prefer running:
  - `music-lyric lyric <input>`
or:
  - `python -m music_lyric`
"""

from music_lyric.cli import main as cli_main


def cli() -> None:
    cli_main()


if __name__ == "__main__":
    cli()
