"""Catalog discovery: every ``meta.json`` under the games directory is one entry."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from launcher_core.errors import LauncherError

META_FILE_NAME = "meta.json"

_LOGGER = logging.getLogger("ArcadeLauncher.Client")


class CatalogError(LauncherError):
    """A meta.json file could not be read or parsed."""


@dataclass(frozen=True)
class CatalogEntry:
    """A launchable program described by a meta.json file."""

    name: str
    author: str
    executable_path: Path
    thumbnail_path: Optional[Path]
    source_dir: Path
    release_date: Optional[datetime] = None

    @property
    def caption(self) -> str:
        if self.author:
            return f"{self.name} by {self.author}"
        return self.name


def _parse_release_date(raw: Any, meta_path: Path) -> Optional[datetime]:
    if raw in (None, ""):
        return None
    if not isinstance(raw, str):
        raise CatalogError(f"{meta_path}: release_date must be a string")
    text = raw.strip()
    # fromisoformat() only accepts a trailing "Z" on newer interpreters.
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise CatalogError(f"{meta_path}: invalid release_date {raw!r}") from exc


def _resolve(base: Path, raw: str) -> Path:
    candidate = Path(raw).expanduser()
    if candidate.is_absolute():
        return candidate
    return (base / candidate).resolve()


def load_meta(meta_path: Path) -> CatalogEntry:
    """Parse one meta.json. Relative paths resolve against its directory."""
    try:
        raw_text = meta_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogError(f"could not read {meta_path}: {exc}") from exc
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise CatalogError(f"could not parse {meta_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise CatalogError(f"{meta_path}: expected a JSON object")

    base = meta_path.parent.resolve()
    executable = data.get("executable_path")
    if not isinstance(executable, str) or not executable.strip():
        raise CatalogError(f"{meta_path}: executable_path is required")
    thumbnail = data.get("thumbnail_path")
    thumbnail_path = _resolve(base, thumbnail) if isinstance(thumbnail, str) and thumbnail.strip() else None
    name = data.get("name")
    author = data.get("author")

    return CatalogEntry(
        name=str(name) if name else base.name,
        author=str(author) if author else "",
        executable_path=_resolve(base, executable.strip()),
        thumbnail_path=thumbnail_path,
        source_dir=base,
        release_date=_parse_release_date(data.get("release_date"), meta_path),
    )


def discover_catalog(games_dir: Path) -> List[CatalogEntry]:
    """Walk ``games_dir`` for meta.json files in path order; broken ones are logged and skipped."""
    if not games_dir.is_dir():
        _LOGGER.warning("Games directory %s does not exist", games_dir)
        return []

    entries: List[CatalogEntry] = []
    for meta_path in sorted(games_dir.rglob(META_FILE_NAME)):
        if not meta_path.is_file():
            continue
        try:
            entry = load_meta(meta_path)
        except CatalogError as exc:
            _LOGGER.warning("Skipping catalog entry: %s", exc)
            continue
        if not entry.executable_path.exists():
            _LOGGER.warning("'%s' points at a missing executable: %s", entry.name, entry.executable_path)
        entries.append(entry)
        _LOGGER.info("Found '%s' at %s", entry.name, meta_path)
    _LOGGER.debug("Catalog loaded from %s: %d entries", games_dir, len(entries))
    return entries
