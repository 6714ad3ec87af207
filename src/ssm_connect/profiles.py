from __future__ import annotations

import os
import re
from collections.abc import Iterable, Mapping
from pathlib import Path

from .errors import ProfileConfigError

PROFILE_HEADER = re.compile(r"^\[profile (?P<name>[^\]]+)\]")


def default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    environ = os.environ if environ is None else environ
    configured = environ.get("AWS_CONFIG_FILE")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".aws" / "config"


def list_profiles(config_path: str | Path | None = None) -> list[str]:
    """Return the profile names declared in an AWS config file, in file order."""
    path = Path(config_path).expanduser() if config_path else default_config_path()
    try:
        with path.open("r", encoding="utf-8") as handle:
            return parse_profiles(handle)
    except (OSError, UnicodeDecodeError) as error:
        raise ProfileConfigError(f"Cannot read AWS config file {path}: {error}") from error


def parse_profiles(lines: Iterable[str]) -> list[str]:
    profiles: list[str] = []
    for line in lines:
        match = PROFILE_HEADER.match(line)
        if match:
            profiles.append(match.group("name"))
    return profiles


def sorted_profiles(profiles: Iterable[str]) -> list[str]:
    return sorted(set(profiles))
