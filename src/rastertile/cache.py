"""On-disk memoization of encoded tiles.

One file per tile in a single flat directory, named from
``(source, zoom, column, row)``. Entries are never expired or evicted here.

Concurrent misses on the same key are not serialized: each caller renders
and writes the tile. Writes go to a temporary file in the cache directory
and are moved into place with ``os.replace``, so a reader sees either no
file or a complete one.
"""
import logging
import os
import pathlib
import tempfile
import urllib.parse
from typing import Callable, NamedTuple

from .errors import StorageFailure

logger = logging.getLogger(__name__)


class CacheKey(NamedTuple):
    source: str
    zoom: int
    column: int
    row: int

    @property
    def filename(self) -> str:
        # identifiers may contain path separators; keep the name one component
        source = urllib.parse.quote(self.source, safe="")
        return f"{source}_{self.zoom}_{self.column}_{self.row}.png"


class TileCache:
    """Flat directory of encoded tiles.

    Parameters
    ----------
    cache_dir : str or pathlib.Path
        Directory holding the tiles; created if missing.
    """

    suffix = ".png"

    def __init__(self, cache_dir="cache"):
        self.cache_dir = pathlib.Path(cache_dir)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StorageFailure(f"Cannot create cache directory {self.cache_dir}: {err}") from err

    def path_for(self, key: CacheKey) -> pathlib.Path:
        return self.cache_dir / key.filename

    def exists(self, key: CacheKey) -> bool:
        return self.path_for(key).is_file()

    def read(self, key: CacheKey) -> bytes:
        try:
            return self.path_for(key).read_bytes()
        except OSError as err:
            raise StorageFailure(f"Cannot read cached tile {key.filename}: {err}") from err

    def write(self, key: CacheKey, data: bytes) -> pathlib.Path:
        """Atomically store ``data`` for ``key``."""
        path = self.path_for(key)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=".", suffix=".tmp")
        except OSError as err:
            raise StorageFailure(f"Cannot write cached tile {key.filename}: {err}") from err
        try:
            with os.fdopen(fd, "wb") as fp:
                fp.write(data)
            os.replace(tmp_name, path)
        except OSError as err:
            pathlib.Path(tmp_name).unlink(missing_ok=True)
            raise StorageFailure(f"Cannot write cached tile {key.filename}: {err}") from err
        logger.info("cached %s (%d bytes)", key.filename, len(data))
        return path

    def lookup_or_compute(self, key: CacheKey, compute: Callable[[], bytes]) -> bytes:
        """Return the cached bytes for ``key``, rendering them on a miss.

        ``compute`` is only called on a miss. If it raises, nothing is
        written and the exception propagates.
        """
        if self.exists(key):
            logger.debug("cache hit %s", key.filename)
            return self.read(key)
        data = compute()
        self.write(key, data)
        return data

    def stats(self) -> dict:
        sizes = []
        for path in self.cache_dir.glob(f"*{self.suffix}"):
            try:
                sizes.append(path.stat().st_size)
            except FileNotFoundError:
                continue
        return {
            "tiles": len(sizes),
            "size_bytes": sum(sizes),
            "cache_directory": str(self.cache_dir),
        }
