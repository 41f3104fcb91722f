from __future__ import annotations

from pathlib import Path

import typer

from karaoke_lyrics.config import AppConfig, load_config, save_config_romaji
from karaoke_lyrics.errors import DecodeError
from karaoke_lyrics.export import block_text, export_json, export_srt
from karaoke_lyrics.font.decode import decode_bitmap_fonts
from karaoke_lyrics.joyu2.decode import decode_joyu2
from karaoke_lyrics.logging_setup import setup_logging
from karaoke_lyrics.pipeline import KaraokeTrack, load_track_files
from karaoke_lyrics.romaji.kana import glyph_code_to_kana
from karaoke_lyrics.romaji.romanizer import ROMAJI_SYSTEMS
from karaoke_lyrics.timeline.tracker import BlockTracker, scroll_offset


app = typer.Typer(no_args_is_help=True, add_completion=False)


@app.callback()
def options(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")):
    """Inspect JOY-U2 lyrics tracks and their bitmap fonts."""
    setup_logging(debug)


def _fail(e: Exception) -> typer.Exit:
    typer.echo(f"Error: {e}", err=True)
    return typer.Exit(code=1)


def _cfg(track: int | None, font: int | None) -> AppConfig:
    cfg = load_config()
    if track is not None:
        cfg = cfg.__class__(**{**cfg.__dict__, "track": track})
    if font is not None:
        cfg = cfg.__class__(**{**cfg.__dict__, "font_index": font})
    return cfg


def _load(bitmap_path: Path, joyu2_path: Path, track: int | None, font: int | None) -> KaraokeTrack:
    try:
        return load_track_files(bitmap_path, joyu2_path, _cfg(track, font))
    except (DecodeError, OSError) as e:
        raise _fail(e)


@app.command()
def fonts(bitmap_path: Path):
    """List the fonts in a bitmap font container."""
    try:
        decoded = decode_bitmap_fonts(bitmap_path.read_bytes())
    except (DecodeError, OSError) as e:
        raise _fail(e)
    for i, f in enumerate(decoded):
        kana = sum(1 for g in f.glyphs if glyph_code_to_kana(g.code) is not None)
        typer.echo(f"font {i}: glyphs={len(f)} kana={kana}")


@app.command()
def events(
    joyu2_path: Path,
    track: int | None = typer.Option(None, "--track", help="Track index (0-2)"),
):
    """Print the raw timing events of a track."""
    cfg = _cfg(track, None)
    try:
        decoded = decode_joyu2(joyu2_path.read_bytes(), cfg.track, presentation_delay=cfg.presentation_delay_ms)
    except (DecodeError, OSError) as e:
        raise _fail(e)
    for ev in decoded.events:
        typer.echo(f"{ev.time}\t{ev.payload.hex(' ')}")


@app.command()
def blocks(
    bitmap_path: Path,
    joyu2_path: Path,
    track: int | None = typer.Option(None, "--track", help="Track index (0-2)"),
    font: int | None = typer.Option(None, "--font", help="Font index (default: same as track)"),
):
    """Print the scheduled lyrics blocks with their romaji."""
    kt = _load(bitmap_path, joyu2_path, track, font)
    for i, b in enumerate(kt.blocks):
        typer.echo(
            f"{i}: in={b.fadein_time} out={b.fadeout_time} "
            f"scroll={len(b.scroll_events)} pos=({b.x_pos},{b.y_pos}) {block_text(kt.font, b)}"
        )


@app.command()
def at(
    bitmap_path: Path,
    joyu2_path: Path,
    time_ms: int,
    track: int | None = typer.Option(None, "--track", help="Track index (0-2)"),
    font: int | None = typer.Option(None, "--font", help="Font index (default: same as track)"),
):
    """Show the blocks on screen at a presentation time."""
    kt = _load(bitmap_path, joyu2_path, track, font)
    visible = BlockTracker.from_blocks(kt.blocks).visible_indices(time_ms)
    if not visible:
        typer.echo("No blocks visible")
        return
    for i in visible:
        b = kt.blocks[i]
        typer.echo(f"{i}: scroll_x={b.x_pos + scroll_offset(b, time_ms):.1f} {block_text(kt.font, b)}")


@app.command()
def export(
    bitmap_path: Path,
    joyu2_path: Path,
    fmt: str = typer.Option("json", "--format", case_sensitive=False, help="json|srt"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
    track: int | None = typer.Option(None, "--track", help="Track index (0-2)"),
    font: int | None = typer.Option(None, "--font", help="Font index (default: same as track)"),
):
    """Export the scheduled lyrics as JSON or SRT."""
    fmt_l = fmt.lower()
    if fmt_l not in ("json", "srt"):
        raise typer.BadParameter("format must be one of: json, srt")

    kt = _load(bitmap_path, joyu2_path, track, font)
    data = export_json(kt) if fmt_l == "json" else export_srt(kt)

    if out:
        out.write_text(data, encoding="utf-8")
    else:
        typer.echo(data, nl=False)


@app.command()
def config(
    romaji: str = typer.Option(..., "--romaji", help="|".join(ROMAJI_SYSTEMS)),
):
    """Persist the romanization system."""
    try:
        save_config_romaji(romaji)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    typer.echo(f"romaji_system={romaji.lower()}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
