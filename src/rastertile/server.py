"""HTTP adapter serving tiles and raster info with FastAPI.

Routes:

    GET /tile/{source}/{zoom}/{column}/{row}.png   PNG tile (404 outside the image)
    GET /info/{source}                             extent and projection JSON
    GET /health                                    cache statistics

Rendering blocks on raster I/O, so it runs on a bounded thread pool
instead of the event loop.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from fastapi import FastAPI, Path
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from . import config
from .cache import TileCache
from .config import TileContext
from .errors import OutsideBounds
from .info import image_info
from .readers import RasterioSource
from .tile import get_tile
from .tile_grid import MAX_ZOOM

logger = logging.getLogger(__name__)


def create_app(context=None, source=None, cache=None, workers=None) -> FastAPI:
    """Build the application; missing collaborators come from the settings."""
    context = context or TileContext.from_settings()
    source = source or RasterioSource(config.get("data_dir"), config.get("resampling"))
    cache = cache or TileCache(config.get("cache_dir"))
    executor = ThreadPoolExecutor(max_workers=workers or int(config.get("workers")),
                                  thread_name_prefix="rastertile")

    @asynccontextmanager
    async def lifespan(app):
        yield
        executor.shutdown(wait=False)

    app = FastAPI(title="rastertile", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.state.context = context
    app.state.source = source
    app.state.cache = cache
    app.state.executor = executor

    async def run_blocking(func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(executor, partial(func, *args))

    def error_response(err, what):
        if isinstance(err, OutsideBounds):
            return JSONResponse({"error": "outside_bounds", "detail": str(err)}, status_code=404)
        logger.error("%s failed: %s", what, err, exc_info=err)
        return JSONResponse({"error": "internal_error", "detail": str(err)}, status_code=500)

    @app.get("/tile/{source_id}/{zoom}/{column}/{row}.png")
    async def tile(source_id: str,
                   zoom: int = Path(ge=0, le=MAX_ZOOM),
                   column: int = Path(ge=0),
                   row: int = Path(ge=0)):
        try:
            data = await run_blocking(get_tile, context, source, cache,
                                      source_id, zoom, column, row)
        except Exception as err:
            return error_response(err, f"tile {source_id}/{zoom}/{column}/{row}")
        return Response(content=data, media_type="image/png")

    @app.get("/info/{source_id}")
    async def info(source_id: str):
        try:
            return await run_blocking(image_info, source, source_id)
        except Exception as err:
            return error_response(err, f"info {source_id}")

    @app.get("/health")
    def health():
        return {"status": "ok", "cache": cache.stats()}

    return app
