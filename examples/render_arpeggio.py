from __future__ import annotations

from pathlib import Path

from notewave import SynthConfig, load_song, render_song

SONG_PATH = Path(__file__).resolve().parent / "piano_arpeggio.json"
OUTPUT_DIR = Path(__file__).resolve().parent / "out"


def main() -> None:
    song = load_song(SONG_PATH)
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    for piano_model in ("harmonic", "overtone"):
        audio = render_song(song, SynthConfig(piano_model=piano_model))
        path = audio.save(OUTPUT_DIR / f"arpeggio_{piano_model}.wav")
        print(f"{piano_model}: {audio.duration:.2f}s, {len(audio)} samples -> {path}")


if __name__ == "__main__":
    main()
