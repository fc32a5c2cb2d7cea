"""Tests for the rastertile.server module."""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from rastertile.cache import CacheKey, TileCache
from rastertile.readers import RasterioSource
from rastertile.server import create_app


@pytest.fixture
def client(geotiff, geotiff_context, temp_dir):
    app = create_app(
        context=geotiff_context,
        source=RasterioSource(geotiff.parent),
        cache=TileCache(temp_dir / "cache"),
        workers=2,
    )
    return TestClient(app)


class TestTileRoute:
    """Tests for GET /tile/{source}/{zoom}/{column}/{row}.png."""

    def test_returns_png(self, client):
        """A tile over the image should be served as PNG."""
        response = client.get("/tile/image.tif/0/0/0.png")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        img = Image.open(io.BytesIO(response.content))
        assert img.size == (256, 256)
        assert img.mode == "RGBA"

    def test_nodata_is_transparent(self, client):
        """Band-1 zeros should come back fully transparent."""
        response = client.get("/tile/image.tif/0/0/0.png")
        img = Image.open(io.BytesIO(response.content))
        assert img.getpixel((0, 128))[3] == 0
        assert img.getpixel((200, 128)) == (120, 60, 30, 255)

    def test_writes_cache(self, client, temp_dir):
        """Served tiles should be stored in the cache directory."""
        client.get("/tile/image.tif/1/1/1.png")
        assert TileCache(temp_dir / "cache").exists(CacheKey("image.tif", 1, 1, 1))

    def test_repeat_requests_identical(self, client):
        """The second response should be byte-identical to the first."""
        first = client.get("/tile/image.tif/2/1/2.png")
        second = client.get("/tile/image.tif/2/1/2.png")
        assert first.content == second.content

    def test_outside_bounds_is_404(self, client):
        """A tile beyond the image should be not found."""
        response = client.get("/tile/image.tif/1/5/5.png")
        assert response.status_code == 404
        assert response.json()["error"] == "outside_bounds"

    @pytest.mark.parametrize("path", [
        "/tile/image.tif/-1/0/0.png",
        "/tile/image.tif/5000/0/0.png",
        "/tile/image.tif/1/-1/0.png",
        "/tile/image.tif/1/0/-1.png",
    ])
    def test_rejects_out_of_range_address(self, client, path):
        """Negative or oversized tile addresses should be rejected before rendering."""
        assert client.get(path).status_code == 422

    def test_missing_raster_is_500(self, client):
        """Other failures should be internal errors."""
        response = client.get("/tile/missing.tif/0/0/0.png")
        assert response.status_code == 500


class TestInfoRoute:
    """Tests for GET /info/{source}."""

    def test_info(self, client):
        """info should return the extent and projection as JSON."""
        response = client.get("/info/image.tif")
        assert response.status_code == 200
        body = response.json()
        assert body["extent"]["xmax"] == 100.0
        assert "UTM zone 28N" in body["projection_info"]["name"]

    def test_missing_raster(self, client):
        """info for a missing raster should be an internal error."""
        assert client.get("/info/missing.tif").status_code == 500


class TestHealth:
    """Tests for GET /health."""

    def test_health(self, client):
        """health should report cache stats."""
        client.get("/tile/image.tif/0/0/0.png")
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["cache"]["tiles"] == 1


class TestCors:
    """Tests for the CORS policy."""

    def test_wildcard_origin(self, client):
        """Any origin should be allowed for GET."""
        response = client.get("/health", headers={"Origin": "http://example.com"})
        assert response.headers["access-control-allow-origin"] == "*"
