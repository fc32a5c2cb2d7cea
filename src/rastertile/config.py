"""Configuration management for the rastertile server.

This module handles loading and managing configuration settings using
Dynaconf. Settings are loaded from multiple locations in order of
increasing priority:

1. Global settings (/etc/rastertile/)
2. User settings (~/.config/rastertile/)
3. Current directory settings (./)
4. Environment variable specified file (RASTERTILE_SETTINGS_FILE_FOR_DYNACONF)

Any key can also be overridden with a ``RASTERTILE_`` prefixed environment
variable, e.g. ``RASTERTILE_REVERSE_Y=true``.

Attributes
----------
USER_DIR : pathlib.Path
    Path to user configuration directory.
GLOB_DIR : pathlib.Path
    Path to global configuration directory.
CURR_DIR : pathlib.Path
    Path to current working directory.
settings : Dynaconf
    The Dynaconf settings object with loaded configuration.
"""
import os
import pathlib
from dataclasses import dataclass

from dynaconf import Dynaconf

from .geometry import Extent
from .tile_grid import TileGrid

USER_DIR = pathlib.Path("~/.config/rastertile").expanduser()
GLOB_DIR = pathlib.Path("/etc/rastertile/")
CURR_DIR = pathlib.Path("./").absolute()
settings_files = [
    GLOB_DIR / "settings.toml",
    GLOB_DIR / ".secrets.toml",
    USER_DIR / "settings.toml",
    USER_DIR / ".secrets.toml",
    CURR_DIR / "settings.toml",
    CURR_DIR / ".secrets.toml"
    ]
extra_file = os.getenv("RASTERTILE_SETTINGS_FILE_FOR_DYNACONF")
if extra_file:
    settings_files.append(pathlib.Path(extra_file).absolute())

settings = Dynaconf(
    merge_enabled = True,
    envvar_prefix="RASTERTILE",
    settings_files=settings_files,
    environments=True,
    load_dotenv=True,
)

DEFAULTS = {
    "tile_grid": "webmercator",
    "reverse_y": False,
    "tile_width": 256,
    "tile_height": 256,
    "data_dir": ".",
    "cache_dir": "cache",
    "resampling": "nearest",
    "workers": 4,
    "host": "0.0.0.0",
    "port": 3011,
    "zoom_levels": [0, 1, 2, 3, 4, 5],
    "verbose": False,
    "log_level": "INFO",
}


def change_env(new_env):
    """Change the active Dynaconf environment.

    Parameters
    ----------
    new_env : str
        The environment name to switch to (e.g., 'development', 'production').
    """
    settings.setenv(new_env)
    settings.reload()


def get(key, source=None):
    """Return a setting, falling back to the package default."""
    source = settings if source is None else source
    return source.get(key, DEFAULTS[key])


def parse_tile_grid(value) -> TileGrid:
    """Build a TileGrid from a ``tile_grid`` setting.

    Parameters
    ----------
    value : str or sequence of float
        Either ``"webmercator"`` or ``[xmin, ymin, xmax, ymax]``.

    Returns
    -------
    TileGrid
        The grid described by the setting.

    Raises
    ------
    ValueError
        If the value is neither form or describes a degenerate extent.
    """
    if isinstance(value, str):
        if value.lower() in ("webmercator", "web_mercator", "epsg:3857"):
            return TileGrid.web_mercator()
        raise ValueError(f"Unknown tile grid: {value!r}")
    try:
        xmin, ymin, xmax, ymax = (float(v) for v in value)
    except (TypeError, ValueError) as err:
        raise ValueError(f"tile_grid must be 'webmercator' or four numbers, got {value!r}") from err
    extent = Extent(xmin, ymin, xmax, ymax)
    if extent.is_degenerate:
        raise ValueError(f"tile_grid extent is degenerate: {value!r}")
    return TileGrid(extent)


@dataclass(frozen=True)
class TileContext:
    """Immutable per-process settings consumed by the tile orchestrator."""

    tile_grid: TileGrid
    reverse_y: bool = False
    tile_width: int = 256
    tile_height: int = 256

    def __post_init__(self):
        if self.tile_width <= 0 or self.tile_height <= 0:
            raise ValueError(
                f"Tile size must be positive, got {self.tile_width}x{self.tile_height}")

    @property
    def tile_size(self):
        return self.tile_width, self.tile_height

    @classmethod
    def from_settings(cls, source=None):
        """Snapshot the current (mutable) settings into a TileContext."""
        return cls(
            tile_grid=parse_tile_grid(get("tile_grid", source)),
            reverse_y=bool(get("reverse_y", source)),
            tile_width=int(get("tile_width", source)),
            tile_height=int(get("tile_height", source)),
        )
