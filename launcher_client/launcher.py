from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import QApplication

from launcher_client.catalog import discover_catalog
from launcher_client.gamepad import build_sampler
from launcher_client.logging_utils import configure_logging
from launcher_client.settings import SETTINGS_FILE_NAME, LauncherSettings, apply_env_overrides, load_settings
from launcher_client.window import LauncherWindow
from launcher_core.app_controller import AppController
from launcher_core.errors import EmptyCatalogError
from launcher_core.process_supervisor import ProcessSupervisor

_LOGGER = logging.getLogger("ArcadeLauncher.Client")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gamepad-driven arcade launcher")
    parser.add_argument("--games-dir", help="Directory searched for meta.json files (default ./games)")
    parser.add_argument(
        "--settings",
        default=SETTINGS_FILE_NAME,
        help=f"Path to the settings JSON file (default ./{SETTINGS_FILE_NAME})",
    )
    parser.add_argument("--windowed", action="store_true", help="Run in a window instead of fullscreen")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def resolve_settings(args: argparse.Namespace) -> LauncherSettings:
    """File settings, then ARCADE_LAUNCHER_* variables, then command-line flags."""
    settings = apply_env_overrides(load_settings(Path(args.settings).expanduser()))
    if args.games_dir:
        settings = replace(settings, games_dir=Path(args.games_dir).expanduser())
    if args.windowed:
        settings = replace(settings, fullscreen=False)
    if args.debug:
        settings = replace(settings, debug=True)
    return settings


def build_controller(settings: LauncherSettings, supervisor: ProcessSupervisor) -> AppController:
    entries = discover_catalog(settings.games_dir)
    return AppController(
        entries,
        supervisor,
        dead_zone=settings.dead_zone,
        repeat_ticks=settings.navigation_timeout_ticks,
        kill_hold_ticks=settings.kill_hold_ticks,
    )


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = resolve_settings(args)
    configure_logging(debug=settings.debug, retention=settings.log_retention)

    _LOGGER.info("Starting arcade launcher (pid=%s)", os.getpid())
    _LOGGER.debug(
        "Settings: games_dir=%s dead_zone=%.2f nav_timeout=%d kill_hold=%d tick_rate=%d joystick=%d",
        settings.games_dir,
        settings.dead_zone,
        settings.navigation_timeout_ticks,
        settings.kill_hold_ticks,
        settings.tick_rate,
        settings.joystick_index,
    )

    supervisor = ProcessSupervisor()
    try:
        controller = build_controller(settings, supervisor)
    except EmptyCatalogError as exc:
        _LOGGER.error("%s (games dir: %s)", exc, settings.games_dir.resolve())
        return 1

    app = QApplication(sys.argv[:1])
    sampler = build_sampler(settings)
    sampler.start()
    window = LauncherWindow(controller, sampler, settings)
    window.show_launcher()
    window.start()

    exit_code = app.exec()
    window.stop()
    sampler.stop()
    supervisor.shutdown()
    _LOGGER.info("Arcade launcher exiting with code %s", exit_code)
    return int(exit_code)


if __name__ == "__main__":
    raise SystemExit(main())
