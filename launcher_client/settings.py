"""Configuration helpers for the arcade launcher."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

ENV_PREFIX = "ARCADE_LAUNCHER_"
SETTINGS_FILE_NAME = "launcher_settings.json"
LOG_RETENTION_MIN = 1
LOG_RETENTION_MAX = 20


@dataclass(frozen=True)
class LauncherSettings:
    """Values used to bootstrap the launcher. Tick-based values count 1/tick_rate seconds."""

    games_dir: Path = Path("./games")
    dead_zone: float = 0.5
    navigation_timeout_ticks: int = 20
    kill_hold_ticks: int = 60
    tick_rate: int = 60
    joystick_index: int = 0
    nav_axis: int = 0
    confirm_button: int = 0
    kill_buttons: Tuple[int, int] = (7, 6)
    font_size: int = 32
    fullscreen: bool = True
    window_title: str = "Arcade Launcher"
    log_retention: int = 5
    debug: bool = False

    @property
    def tick_interval_ms(self) -> int:
        return max(1, round(1000 / self.tick_rate))


def _coerce_int(raw: Any, fallback: int, *, minimum: int, maximum: Optional[int] = None) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    if value < minimum:
        return minimum
    if maximum is not None and value > maximum:
        return maximum
    return value


def _coerce_dead_zone(raw: Any, fallback: float) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return fallback
    # Outside (0, 1) the filter would either fire on noise or never fire.
    if not 0.0 < value < 1.0:
        return fallback
    return value


def _coerce_bool(raw: Any, fallback: bool) -> bool:
    if raw is None:
        return fallback
    if isinstance(raw, str):
        token = raw.strip().lower()
        if token in {"1", "true", "yes", "on"}:
            return True
        if token in {"0", "false", "no", "off", ""}:
            return False
        return fallback
    return bool(raw)


def _coerce_button_pair(raw: Any, fallback: Tuple[int, int]) -> Tuple[int, int]:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        return fallback
    try:
        first, second = int(raw[0]), int(raw[1])
    except (TypeError, ValueError):
        return fallback
    if first < 0 or second < 0 or first == second:
        return fallback
    return first, second


def settings_from_mapping(data: Mapping[str, Any], base: Optional[LauncherSettings] = None) -> LauncherSettings:
    """Build settings from a JSON-like mapping, keeping ``base`` values for bad or missing keys."""
    defaults = base or LauncherSettings()
    games_dir = defaults.games_dir
    raw_games_dir = data.get("games_dir")
    if isinstance(raw_games_dir, str) and raw_games_dir.strip():
        games_dir = Path(raw_games_dir).expanduser()
    title = data.get("window_title")
    return LauncherSettings(
        games_dir=games_dir,
        dead_zone=_coerce_dead_zone(data.get("dead_zone", defaults.dead_zone), defaults.dead_zone),
        navigation_timeout_ticks=_coerce_int(
            data.get("navigation_timeout_ticks", defaults.navigation_timeout_ticks),
            defaults.navigation_timeout_ticks,
            minimum=0,
        ),
        kill_hold_ticks=_coerce_int(
            data.get("kill_hold_ticks", defaults.kill_hold_ticks), defaults.kill_hold_ticks, minimum=1
        ),
        tick_rate=_coerce_int(data.get("tick_rate", defaults.tick_rate), defaults.tick_rate, minimum=1, maximum=240),
        joystick_index=_coerce_int(data.get("joystick_index", defaults.joystick_index), defaults.joystick_index, minimum=0),
        nav_axis=_coerce_int(data.get("nav_axis", defaults.nav_axis), defaults.nav_axis, minimum=0),
        confirm_button=_coerce_int(data.get("confirm_button", defaults.confirm_button), defaults.confirm_button, minimum=0),
        kill_buttons=_coerce_button_pair(data.get("kill_buttons", defaults.kill_buttons), defaults.kill_buttons),
        font_size=_coerce_int(data.get("font_size", defaults.font_size), defaults.font_size, minimum=6),
        fullscreen=_coerce_bool(data.get("fullscreen"), defaults.fullscreen),
        window_title=title if isinstance(title, str) and title else defaults.window_title,
        log_retention=_coerce_int(
            data.get("log_retention", defaults.log_retention),
            defaults.log_retention,
            minimum=LOG_RETENTION_MIN,
            maximum=LOG_RETENTION_MAX,
        ),
        debug=_coerce_bool(data.get("debug"), defaults.debug),
    )


def load_settings(settings_path: Path) -> LauncherSettings:
    """Read launcher_settings.json if it exists; defaults otherwise."""
    defaults = LauncherSettings()
    try:
        raw = settings_path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return defaults
    try:
        data: Dict[str, Any] = json.loads(raw)
    except json.JSONDecodeError:
        return defaults
    if not isinstance(data, dict):
        return defaults
    return settings_from_mapping(data, defaults)


def apply_env_overrides(settings: LauncherSettings, env: Optional[Mapping[str, str]] = None) -> LauncherSettings:
    """Apply ARCADE_LAUNCHER_* variables on top of file settings."""
    source = os.environ if env is None else env
    updates: Dict[str, Any] = {}
    games_dir = source.get(f"{ENV_PREFIX}GAMES_DIR")
    if games_dir:
        updates["games_dir"] = Path(games_dir).expanduser()
    dead_zone = source.get(f"{ENV_PREFIX}DEAD_ZONE")
    if dead_zone is not None:
        updates["dead_zone"] = _coerce_dead_zone(dead_zone, settings.dead_zone)
    joystick = source.get(f"{ENV_PREFIX}JOYSTICK")
    if joystick is not None:
        updates["joystick_index"] = _coerce_int(joystick, settings.joystick_index, minimum=0)
    fullscreen = source.get(f"{ENV_PREFIX}FULLSCREEN")
    if fullscreen is not None:
        updates["fullscreen"] = _coerce_bool(fullscreen, settings.fullscreen)
    debug = source.get(f"{ENV_PREFIX}DEBUG")
    if debug is not None:
        updates["debug"] = _coerce_bool(debug, settings.debug)
    if not updates:
        return settings
    return replace(settings, **updates)


def env_flag(name: str, default: bool, env: Optional[Mapping[str, str]] = None) -> bool:
    source = os.environ if env is None else env
    value = source.get(name)
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "off", "no", ""}
