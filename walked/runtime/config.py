"""JSON config loading for display settings and key bindings.

The config is one flat JSON object: action names map to binding specs and
the remaining keys are display settings. Loading is defensive: anything
missing or malformed falls back to its default and is reported as a
problem string instead of failing startup.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from platformdirs import user_config_dir

from ..input import ACTION_NAMES, DEFAULT_BINDINGS

LOGGER = logging.getLogger(__name__)

APP_NAME = "walked"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


@dataclass(frozen=True)
class Settings:
    """Non-binding display settings."""

    normal_mode_text: str = "NORMAL"
    insert_mode_text: str = "INSERT"
    search_mode_text: str = "SEARCH"
    show_entry_number: bool = True
    show_entry_type: bool = True
    show_working_directory: bool = True
    simple_working_directory: bool = False
    directory_text: str = "D"
    file_text: str = "F"
    symlink_text: str = "S"
    other_text: str = "O"
    show_hidden: bool = True
    extended_keys: bool = False


@dataclass(frozen=True)
class LoadedConfig:
    settings: Settings
    bindings: dict[str, object]
    problems: list[str]


def default_config_data() -> dict[str, object]:
    """Return the full default config as JSON-ready data."""
    data: dict[str, object] = asdict(Settings())
    for action, spec in DEFAULT_BINDINGS.items():
        data[action.value] = spec
    return data


def load_config(path: Path | None = None) -> tuple[dict[str, object], str | None]:
    """Load the JSON config object at ``path``.

    Returns ``(data, problem)``. A missing file is not a problem; unreadable
    or malformed files and non-object top levels yield ``{}`` plus a message.
    """
    config_path = CONFIG_PATH if path is None else path
    if not config_path.exists():
        return {}, None
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        return {}, f"config {config_path}: {exc}"
    if not isinstance(data, dict):
        return {}, f"config {config_path}: top level must be a JSON object"
    return data, None


def save_config(data: dict[str, object], path: Path | None = None) -> str | None:
    """Persist ``data`` as pretty-printed JSON; return a problem on failure."""
    config_path = CONFIG_PATH if path is None else path
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        return f"could not write config {config_path}: {exc}"
    return None


def settings_from_mapping(data: dict[str, object]) -> tuple[Settings, dict[str, object], list[str]]:
    """Split raw config data into typed settings, binding specs, and problems.

    Setting values must match the default's type exactly (``bool`` is not
    accepted where a string is expected and vice versa); mismatches keep the
    default. Unknown keys are reported and ignored.
    """
    defaults = Settings()
    values: dict[str, object] = {}
    bindings: dict[str, object] = {}
    problems: list[str] = []
    setting_names = {item.name for item in fields(Settings)}

    for key, value in data.items():
        if key in ACTION_NAMES:
            bindings[key] = value
            continue
        if key not in setting_names:
            problems.append(f"unknown config key {key!r}")
            continue
        expected = type(getattr(defaults, key))
        if type(value) is not expected:
            problems.append(f"config key {key!r} must be a {expected.__name__}")
            continue
        values[key] = value
    return Settings(**values), bindings, problems


def load_settings(path: Path | None = None, *, create_missing: bool = False) -> LoadedConfig:
    """Load settings and binding overrides, writing defaults when asked.

    With ``create_missing`` a missing config file is created from the
    defaults before use.
    """
    config_path = CONFIG_PATH if path is None else path
    problems: list[str] = []
    if create_missing and not config_path.exists():
        problem = save_config(default_config_data(), config_path)
        if problem is not None:
            problems.append(problem)
    data, problem = load_config(config_path)
    if problem is not None:
        problems.append(problem)
    settings, bindings, mapping_problems = settings_from_mapping(data)
    problems.extend(mapping_problems)
    for message in problems:
        LOGGER.warning("%s", message)
    return LoadedConfig(settings=settings, bindings=bindings, problems=problems)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_CONFIG_PATH",
    "Settings",
    "LoadedConfig",
    "default_config_data",
    "load_config",
    "save_config",
    "settings_from_mapping",
    "load_settings",
]
