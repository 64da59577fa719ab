from __future__ import annotations

import logging
import os
import sys
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, List, Optional

from launcher_client.settings import ENV_PREFIX, env_flag

LOGGER_NAMES = ("ArcadeLauncher.Core", "ArcadeLauncher.Client")
LOG_FILE_NAME = "arcade-launcher.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_logs_dir(log_dir_name: str = "ArcadeLauncher") -> Path:
    """
    Resolve the directory to store launcher logs.

    Strategy:
    - Use ARCADE_LAUNCHER_LOG_DIR if set.
    - Fall back to XDG state/cache locations, then `cwd/logs/<log_dir_name>`.
    - Final fallback: tempdir/<log_dir_name>.
    """
    candidates: List[Path] = []

    env_override = os.environ.get(f"{ENV_PREFIX}LOG_DIR")
    if env_override:
        candidates.append(Path(env_override).expanduser())
    else:
        state_home = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
        cache_home = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
        candidates.append(state_home / log_dir_name)
        candidates.append(cache_home / log_dir_name)
        candidates.append(Path.cwd() / "logs" / log_dir_name)

    for target in candidates:
        try:
            target.mkdir(parents=True, exist_ok=True)
            return target
        except OSError:
            continue

    temp_fallback = Path(tempfile.gettempdir()) / log_dir_name
    temp_fallback.mkdir(parents=True, exist_ok=True)
    return temp_fallback


def configure_logging(
    *,
    debug: bool,
    retention: int,
    log_dir: Optional[Path] = None,
    console: bool = True,
    logger_names: Iterable[str] = LOGGER_NAMES,
    max_bytes: int = 512 * 1024,
) -> List[logging.Logger]:
    """Route the launcher loggers to ``arcade-launcher.log`` (and optionally stderr).

    ``retention`` counts the live file plus its rotated backups. Existing
    handlers on the named loggers are closed and replaced.
    """
    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)
    handlers: List[logging.Handler] = []
    target_dir = log_dir or resolve_logs_dir()
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            target_dir / LOG_FILE_NAME,
            maxBytes=max_bytes,
            backupCount=max(1, retention) - 1,
            encoding="utf-8",
        )
    except OSError as exc:
        print(f"Launcher file logging disabled ({target_dir}): {exc}", file=sys.stderr)
    else:
        handlers.append(file_handler)
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)

    level = logging.DEBUG if debug else logging.INFO
    propagate = env_flag(f"{ENV_PREFIX}PROPAGATE_LOGS", False)
    loggers: List[logging.Logger] = []
    for name in logger_names:
        logger = logging.getLogger(name)
        for existing in list(logger.handlers):
            logger.removeHandler(existing)
            existing.close()
        for handler in handlers:
            logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = propagate
        loggers.append(logger)
    return loggers
