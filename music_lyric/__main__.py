from music_lyric.cli import main

main()
