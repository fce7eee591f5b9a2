from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console

from .config import SAMPLE_RATE, coerce_config
from .logging_utils import configure_logging, debug_enabled, log_exception
from .render import render_song
from .song import load_song
from .spinner import Spinner, render_error
from .timing import song_duration

_LOGGER = logging.getLogger("notewave.cli")
_CONSOLE = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notewave")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Synthesize a song document.")
    render.add_argument("song", type=Path)
    render.add_argument("--sample-rate", type=int, default=SAMPLE_RATE)
    render.add_argument("--piano-model", choices=["harmonic", "overtone"], default="harmonic")
    render.add_argument("--overtones", type=Path, default=None, help="Overtone table CSV.")
    render.add_argument("--csv", type=Path, default=None, help="Write one sample per line.")
    render.add_argument("--wav", type=Path, default=None, help="Write a float wav file.")
    render.add_argument("--play", action="store_true", help="Play the result when done.")

    info = sub.add_parser("info", help="Describe a song document.")
    info.add_argument("song", type=Path)
    return parser


def _render(args: argparse.Namespace) -> int:
    song = load_song(args.song)
    config = coerce_config(
        {
            "sample_rate": args.sample_rate,
            "piano_model": args.piano_model,
            "overtone_path": args.overtones,
        }
    )
    with Spinner(f"Rendering {song.songname}"):
        audio = render_song(song, config)

    csv_path: Path | None = args.csv
    if csv_path is None and args.wav is None:
        csv_path = args.song.with_suffix(".csv")
    if csv_path is not None:
        audio.dump(csv_path)
        _CONSOLE.print(f"Wrote samples to {csv_path}")
    if args.wav is not None:
        audio.save(args.wav)
        _CONSOLE.print(f"Wrote wav to {args.wav} (sr={audio.sample_rate})")
    if args.play:
        audio.play()
    return 0


def _info(args: argparse.Namespace) -> int:
    song = load_song(args.song)
    seconds, _ = song_duration(song.packets, song.bpm, SAMPLE_RATE)
    _CONSOLE.print(f"{song.songname} by {song.artist}")
    _CONSOLE.print(f"Tempo: {song.bpm:g} bpm, events: {len(song.packets)}, duration: {seconds:.2f}s")
    return 0


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "render":
            return _render(args)
        if args.command == "info":
            return _info(args)
        parser.print_help()
        return 1
    except Exception as exc:
        _LOGGER.warning("notewave %s failed: %s", args.command, exc, exc_info=debug_enabled())
        log_exception(f"notewave {args.command}", exc)
        render_error(f"notewave {args.command}", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
