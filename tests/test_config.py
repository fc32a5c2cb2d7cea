"""Tests for the rastertile.config module."""

from unittest.mock import patch

import pytest

from rastertile import config
from rastertile.config import TileContext, parse_tile_grid
from rastertile.geometry import Extent
from rastertile.tile_grid import TileGrid


class TestParseTileGrid:
    """Tests for parse_tile_grid."""

    def test_webmercator(self):
        """'webmercator' should select the world grid."""
        assert parse_tile_grid("webmercator") == TileGrid.web_mercator()
        assert parse_tile_grid("EPSG:3857") == TileGrid.web_mercator()

    def test_explicit_extent(self):
        """Four numbers should build a grid over that extent."""
        grid = parse_tile_grid([166021.44308053772, 0.0, 534994.655061136, 9329005.182447437])
        assert grid.extent == Extent(166021.44308053772, 0.0, 534994.655061136, 9329005.182447437)

    def test_unknown_name(self):
        """An unknown grid name should raise ValueError."""
        with pytest.raises(ValueError):
            parse_tile_grid("plate_carree")

    def test_wrong_length(self):
        """A sequence that is not four numbers should raise ValueError."""
        with pytest.raises(ValueError):
            parse_tile_grid([0, 0, 1])

    def test_degenerate(self):
        """A degenerate extent should raise ValueError."""
        with pytest.raises(ValueError):
            parse_tile_grid([0, 0, 0, 10])


class TestTileContext:
    """Tests for TileContext."""

    def test_defaults_from_empty_settings(self):
        """Missing keys should fall back to package defaults."""
        context = TileContext.from_settings({})
        assert context.tile_grid == TileGrid.web_mercator()
        assert context.reverse_y is False
        assert context.tile_size == (256, 256)

    def test_from_settings(self):
        """Configured values should be carried over."""
        context = TileContext.from_settings({
            "tile_grid": [0, 0, 1000, 1000],
            "reverse_y": True,
            "tile_width": 512,
            "tile_height": 512,
        })
        assert context.tile_grid.extent == Extent(0, 0, 1000, 1000)
        assert context.reverse_y is True
        assert context.tile_size == (512, 512)

    def test_is_immutable(self):
        """A context cannot be modified after construction."""
        context = TileContext.from_settings({})
        with pytest.raises(AttributeError):
            context.reverse_y = True

    def test_rejects_non_positive_size(self):
        """Tile sizes must be positive."""
        with pytest.raises(ValueError):
            TileContext(TileGrid.web_mercator(), tile_width=0)


class TestChangeEnv:
    """Tests for change_env."""

    @patch.object(config, "settings")
    def test_switches_and_reloads(self, mock_settings):
        """change_env should set the environment and reload settings."""
        config.change_env("production")
        mock_settings.setenv.assert_called_once_with("production")
        mock_settings.reload.assert_called_once()
