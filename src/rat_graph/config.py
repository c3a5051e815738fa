"""Configuration for the rat graph renderer."""

import os
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from rat_graph.exceptions import ConfigError

# Settings file location. First file found is used.
CONFIG_FILES: list[Path] = [
    Path("~/.config/rat/config.yaml").expanduser(),
    Path("~/.rat.yaml").expanduser(),
]

# Directory with the graph's markdown files. First directory which is found is used.
GRAPH_DIRECTORIES: list[Path] = [
    Path("~/.local/share/rat/graph").expanduser(),
    Path("~/rat").expanduser(),
]

# Endpoint under which the file proxy serves relative file URLs.
FILE_ENDPOINT: str = "/graph/file/"

# Endpoint under which nodes are viewed.
VIEW_ENDPOINT: str = "/view/"

DEFAULT_TIMEZONE: str = "UTC"
DEFAULT_ROOT_NAME: str = "root"

DISTRIBUTION_NAME: str = "rat-graph"


@dataclass(frozen=True)
class Fileserver:
    """A fileserver relative file URLs may be resolved against."""

    authority: str
    user: str = ""
    password: str = ""


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one process."""

    graph_dir: Path | None = None
    timezone: str = DEFAULT_TIMEZONE
    root_name: str = DEFAULT_ROOT_NAME
    root_content: str = ""
    fileservers: tuple[Fileserver, ...] = ()


def server_version() -> str:
    """Return the installed version string of this package."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "0.0.0+unknown"


def _find_config_file() -> Path | None:
    env_path = os.environ.get("RAT_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    for candidate in CONFIG_FILES:
        if candidate.is_file():
            return candidate
    return None


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        msg = f"config section {key!r} must be a mapping, got {type(value).__name__}"
        raise ConfigError(msg)
    return value


def _parse_fileservers(raw: Any) -> tuple[Fileserver, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        msg = "urlResolver.fileservers must be a list"
        raise ConfigError(msg)

    fileservers: list[Fileserver] = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("authority"):
            msg = f"fileserver entry needs an authority: {entry!r}"
            raise ConfigError(msg)
        fileservers.append(
            Fileserver(
                authority=str(entry["authority"]),
                user=str(entry.get("user") or ""),
                password=str(entry.get("password") or ""),
            )
        )
    return tuple(fileservers)


def validate_timezone(name: str) -> str:
    """Return name if it is a known IANA time zone, raise ConfigError otherwise."""
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as err:
        msg = f"unknown time zone {name!r}"
        raise ConfigError(msg) from err
    return name


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a YAML file, then apply environment overrides.

    Args:
        path: Settings file. When None, $RAT_CONFIG or the first existing
            entry of CONFIG_FILES is used; no file at all means defaults.

    Returns:
        The resolved Settings.
    """
    config_path = path or _find_config_file()
    data: dict[str, Any] = {}
    if config_path is not None:
        try:
            loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as err:
            msg = f"failed to read config file {str(config_path)!r}"
            raise ConfigError(msg) from err
        if loaded is not None and not isinstance(loaded, dict):
            msg = f"config file {str(config_path)!r} must contain a mapping"
            raise ConfigError(msg)
        data = loaded or {}

    graph = _section(data, "graph")
    root = _section(graph, "root")
    resolver = _section(data, "urlResolver")

    graph_dir_raw = os.environ.get("RAT_GRAPH_DIR") or graph.get("dir")
    timezone = os.environ.get("RAT_TIMEZONE") or graph.get("timeZone") or DEFAULT_TIMEZONE

    return Settings(
        graph_dir=Path(str(graph_dir_raw)).expanduser() if graph_dir_raw else None,
        timezone=validate_timezone(str(timezone)),
        root_name=str(root.get("name") or DEFAULT_ROOT_NAME),
        root_content=str(root.get("content") or ""),
        fileservers=_parse_fileservers(resolver.get("fileservers")),
    )


def resolve_graph_directory(settings: Settings) -> Path:
    """Return the graph directory from settings or the first existing candidate."""
    if settings.graph_dir is not None:
        if not settings.graph_dir.is_dir():
            msg = f"Graph directory {str(settings.graph_dir)!r} not found"
            raise ConfigError(msg)
        return settings.graph_dir

    for candidate in GRAPH_DIRECTORIES:
        if candidate.is_dir():
            return candidate

    msg = f"Cannot find graph directories, none of those exist: {GRAPH_DIRECTORIES!r}"
    raise ConfigError(msg)
