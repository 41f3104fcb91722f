from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from karaoke_lyrics.joyu2.decode import PRESENTATION_DELAY_MS
from karaoke_lyrics.romaji.romanizer import ROMAJI_SYSTEMS

logger = logging.getLogger(__name__)


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "karaoke-lyrics"
    return Path.home() / ".config" / "karaoke-lyrics"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path

    # Track selection
    track: int
    font_index: int | None  # None: same index as the track

    # Timing
    presentation_delay_ms: int

    # Romanization
    romaji_system: str


def load_config() -> AppConfig:
    font_env = os.getenv("KARAOKE_LYRICS_FONT")
    config_dir = _config_dir()

    return AppConfig(
        config_dir=config_dir,
        track=int(os.getenv("KARAOKE_LYRICS_TRACK", "2")),
        font_index=int(font_env) if font_env else None,
        presentation_delay_ms=int(os.getenv("KARAOKE_LYRICS_DELAY_MS", str(PRESENTATION_DELAY_MS))),
        romaji_system=_load_romaji_system(config_dir),
    )


def _load_romaji_system(config_dir: Path) -> str:
    # Priority: config.json → KARAOKE_LYRICS_ROMAJI → "hepburn"
    cfg_path = config_dir / "config.json"
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        else:
            raw = str(data.get("romaji_system") or "").lower() if isinstance(data, dict) else ""
            if raw in ROMAJI_SYSTEMS:
                return raw
    env_system = (os.getenv("KARAOKE_LYRICS_ROMAJI") or "").lower()
    if env_system in ROMAJI_SYSTEMS:
        return env_system
    return "hepburn"


def save_config_romaji(system: str) -> None:
    system = system.lower()
    if system not in ROMAJI_SYSTEMS:
        raise ValueError(f"Unknown romanization system: {system}")
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, str] = {}
    if cfg_path.exists():
        try:
            loaded = json.loads(cfg_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Overwriting unreadable config %s", cfg_path)
        else:
            if isinstance(loaded, dict):
                data = loaded
    data["romaji_system"] = system
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
