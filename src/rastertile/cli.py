"""Command-line interface for the rastertile server.

This module provides CLI commands for serving, rendering and seeding map
tiles from georeferenced rasters using the Typer framework.
"""
import json
import pathlib
import sys
from typing import List, Optional

import typer

from . import config
from .cache import TileCache
from .config import TileContext
from .errors import OutsideBounds, TileError
from .info import image_info
from .readers import RasterioSource
from .tile import render_tile
from .tilers.pyramid import seed as seed_pyramid
from .utils import setup_logging

app = typer.Typer(help="Serve georeferenced rasters as web map tiles.")


def _source():
    return RasterioSource(config.get("data_dir"), config.get("resampling"))


@app.callback()
def main(env: str = typer.Option("DEFAULT", help="Settings environment to use."),
         verbose: bool = typer.Option(False, "--verbose", "-v")):
    """Serve georeferenced rasters as web map tiles."""
    if env != "DEFAULT":
        config.change_env(env)
    if verbose:
        config.settings.set("verbose", True)
    setup_logging()


@app.command()
def serve(host: Optional[str] = None, port: Optional[int] = None):
    """Run the HTTP tile server."""
    import uvicorn
    from .server import create_app

    uvicorn.run(create_app(),
                host=host or config.get("host"),
                port=port or int(config.get("port")))


@app.command()
def render(source: str, zoom: int, column: int, row: int,
           output: Optional[pathlib.Path] = typer.Option(None, "--output", "-o")):
    """Render one tile as PNG to a file (or stdout)."""
    try:
        data = render_tile(TileContext.from_settings(), _source(), source, zoom, column, row)
    except OutsideBounds as err:
        typer.echo(f"{source}/{zoom}/{column}/{row}: {err}", err=True)
        raise typer.Exit(code=2)
    except TileError as err:
        typer.echo(f"Rendering failed: {err}", err=True)
        raise typer.Exit(code=1)
    if output is None:
        sys.stdout.buffer.write(data)
    else:
        output.write_bytes(data)
        typer.echo(f"Wrote {len(data)} bytes to {output}")


@app.command()
def info(source: str):
    """Print extent and projection details of a raster as JSON."""
    try:
        typer.echo(json.dumps(image_info(_source(), source), indent=2))
    except TileError as err:
        typer.echo(f"Reading {source} failed: {err}", err=True)
        raise typer.Exit(code=1)


@app.command()
def seed(source: str,
         zoom: Optional[List[int]] = typer.Option(None, "--zoom", "-z",
                                                  help="Zoom level (repeatable)."),
         workers: Optional[int] = None):
    """Pre-render all tiles of a raster into the cache."""
    zoom_levels = zoom or list(config.get("zoom_levels"))
    try:
        report = seed_pyramid(TileContext.from_settings(), _source(),
                              TileCache(config.get("cache_dir")), source, zoom_levels,
                              num_workers=workers or int(config.get("workers")))
    except TileError as err:
        typer.echo(f"Seeding {source} failed: {err}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Rendered {report.rendered} tiles, skipped {report.skipped}, "
               f"failed {len(report.failed)}")
    if report.failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
