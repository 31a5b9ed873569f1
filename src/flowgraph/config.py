"""Optional ``flowgraph.toml`` defaults, one table per command.

A missing, unreadable, or malformed file behaves like an empty one.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "flowgraph.toml"
OUTPUT_FORMATS = ("text", "json")

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]

_LOGGER = logging.getLogger(__name__)


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        _LOGGER.debug("cannot read %s: %s", path, exc)
        return {}
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        _LOGGER.warning("ignoring malformed %s: %s", path, exc)
        return {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def _section(
    name: str, root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def verify_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    return _section("verify", root=root, config_path=config_path)


def render_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    return _section("render", root=root, config_path=config_path)


def init_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    return _section("init", root=root, config_path=config_path)


def section_path(section: TomlTable | None, key: str) -> Path | None:
    if not isinstance(section, dict):
        return None
    value = section.get(key)
    if isinstance(value, str) and value.strip():
        return Path(value.strip())
    return None


def section_str(section: TomlTable | None, key: str, default: str) -> str:
    if not isinstance(section, dict):
        return default
    value = section.get(key)
    if isinstance(value, str):
        return value
    return default


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged
