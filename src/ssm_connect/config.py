from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import SettingsError

DEFAULT_REGION = "eu-west-1"
DEFAULT_SETTINGS_PATH = Path("~/.ssm-connect.yaml")
PROFILE_ENV_VARS = ("AWS_PROFILE", "AWS_DEFAULT_PROFILE")
REGION_ENV_VAR = "AWS_DEFAULT_REGION"


@dataclass(slots=True, frozen=True)
class ConnectSettings:
    default_region: str = DEFAULT_REGION
    page_size: int = 50
    max_page_retries: int = 3
    plugin: str = "session-manager-plugin"
    profile_list_size: int = 10
    instance_list_size: int = 15


DEFAULT_SETTINGS = ConnectSettings()


def load_settings(config_path: str | Path | None = None) -> ConnectSettings:
    path = Path(config_path).expanduser() if config_path else DEFAULT_SETTINGS_PATH.expanduser()
    if not path.is_file():
        return DEFAULT_SETTINGS

    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as error:
        raise SettingsError(f"Cannot load settings from {path}: {error}") from error

    return ConnectSettings(
        default_region=_coerce_text(
            _safe_mapping_get(loaded, "default_region"), fallback=DEFAULT_SETTINGS.default_region
        ),
        page_size=_coerce_int(
            _safe_mapping_get(loaded, "page_size"), 5, 50, fallback=DEFAULT_SETTINGS.page_size
        ),
        max_page_retries=_coerce_int(
            _safe_mapping_get(loaded, "max_page_retries"), 0, 10, fallback=DEFAULT_SETTINGS.max_page_retries
        ),
        plugin=_coerce_text(_safe_mapping_get(loaded, "plugin"), fallback=DEFAULT_SETTINGS.plugin),
        profile_list_size=_coerce_int(
            _safe_mapping_get(loaded, "profile_list_size"), 1, 100, fallback=DEFAULT_SETTINGS.profile_list_size
        ),
        instance_list_size=_coerce_int(
            _safe_mapping_get(loaded, "instance_list_size"), 1, 100, fallback=DEFAULT_SETTINGS.instance_list_size
        ),
    )


def resolve_region(
    flag: str | None,
    environ: Mapping[str, str] | None = None,
    settings: ConnectSettings = DEFAULT_SETTINGS,
) -> str:
    if flag:
        return flag
    environ = os.environ if environ is None else environ
    return environ.get(REGION_ENV_VAR) or settings.default_region or DEFAULT_REGION


def resolve_profile(flag: str | None, environ: Mapping[str, str] | None = None) -> str | None:
    """Return the profile from the flag or environment, or None when the user has to choose."""
    if flag:
        return flag
    environ = os.environ if environ is None else environ
    for name in PROFILE_ENV_VARS:
        value = environ.get(name)
        if value:
            return value
    return None


def _coerce_int(value: Any, minimum: int, maximum: int, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    try:
        number = int(value)
    except (TypeError, ValueError):
        return fallback

    if minimum <= number <= maximum:
        return number
    return fallback


def _coerce_text(value: Any, fallback: str) -> str:
    if not isinstance(value, str):
        return fallback
    return value.strip() or fallback


def _safe_mapping_get(mapping: Any, key: str, fallback: Any = None) -> Any:
    try:
        return mapping[key]
    except (KeyError, TypeError, IndexError):
        return fallback
