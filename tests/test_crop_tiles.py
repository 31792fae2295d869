"""Cropping tests, mostly pad-then-crop round trips over the tile grid."""
import numpy as np
import pytest
import rasterio
from rasterio.transform import from_origin

from buffer_errors import MissingCounterpartError, PathEnumerationError, TileOpenError, WindowError
from crop_tiles import crop_directory, crop_tile
from pad_tiles import pad_directory, pad_tile

from conftest import GRID, X0, Y0, create_bare_tif, create_tif, write_vrt


@pytest.mark.parametrize("margin", [0, 10, 150])
def test_round_trip(tile_dir, mosaic_path, tmp_path, margin):
    padded_dir = tmp_path / "padded"
    cropped_dir = tmp_path / "cropped"
    pad_directory(tile_dir, padded_dir, mosaic_path, margin)

    report = crop_directory(tile_dir, padded_dir, cropped_dir)

    assert len(report.succeeded) == GRID * GRID
    for result in report.succeeded:
        with rasterio.open(tile_dir / result.name) as org, rasterio.open(result.output) as out:
            assert (out.width, out.height) == (org.width, org.height)
            assert out.transform == org.transform
            assert out.crs == org.crs
            np.testing.assert_array_equal(out.read(1), org.read(1))


def test_crop_large_mosaic_tile(tmp_path):
    tile = np.random.default_rng(1).random((100, 100), dtype="float32")
    create_tif(tmp_path / "a.tif", tile, from_origin(1000, 2000, 1, 1))
    vrt = tmp_path / "big.vrt"
    write_vrt(vrt, [("a.tif", 1000, 1000, 100, 100)], 2000, 2000, (0.0, 1.0, 0.0, 3000.0, 0.0, -1.0))
    with rasterio.open(vrt) as mosaic:
        pad_tile(tmp_path / "a.tif", tmp_path / "a_padded.tif", 10, mosaic)

    crop_tile(tmp_path / "a.tif", tmp_path / "a_padded.tif", tmp_path / "a_cropped.tif")

    with rasterio.open(tmp_path / "a_cropped.tif") as ds:
        assert (ds.width, ds.height) == (100, 100)
        assert (ds.transform.c, ds.transform.f) == (1000.0, 2000.0)
        np.testing.assert_array_equal(ds.read(1), tile)


def test_crop_keeps_processed_values(tile_dir, mosaic_path, tmp_path):
    padded = tmp_path / "padded.tif"
    with rasterio.open(mosaic_path) as mosaic:
        pad_tile(tile_dir / "tile_1_0.tif", padded, 10, mosaic)
    with rasterio.open(padded, "r+") as ds:
        ds.write(ds.read(1) * 2 + 1, 1)

    crop_tile(tile_dir / "tile_1_0.tif", padded, tmp_path / "out.tif")

    with rasterio.open(tile_dir / "tile_1_0.tif") as org, rasterio.open(tmp_path / "out.tif") as out:
        np.testing.assert_array_equal(out.read(1), org.read(1) * 2 + 1)


def test_crop_is_idempotent(tile_dir, mosaic_path, tmp_path):
    padded = tmp_path / "padded.tif"
    with rasterio.open(mosaic_path) as mosaic:
        pad_tile(tile_dir / "tile_2_1.tif", padded, 7, mosaic)

    crop_tile(tile_dir / "tile_2_1.tif", padded, tmp_path / "first.tif")
    crop_tile(tile_dir / "tile_2_1.tif", padded, tmp_path / "second.tif")

    assert (tmp_path / "first.tif").read_bytes() == (tmp_path / "second.tif").read_bytes()


def test_crop_directory_skips_tile_without_original(tile_dir, mosaic_path, tmp_path):
    padded_dir = tmp_path / "padded"
    pad_directory(tile_dir, padded_dir, mosaic_path, 5)
    (tile_dir / "tile_1_2.tif").unlink()

    report = crop_directory(tile_dir, padded_dir, tmp_path / "cropped")

    assert len(report.succeeded) == GRID * GRID - 1
    assert [r.name for r in report.failed] == ["tile_1_2.tif"]
    error = report.failed[0].error
    assert isinstance(error, MissingCounterpartError)
    assert error.operation == "crop"
    assert not (tmp_path / "cropped" / "tile_1_2.tif").exists()


def test_crop_tile_rejects_padded_tile_smaller_than_original(tmp_path):
    create_tif(tmp_path / "org.tif", np.zeros((20, 20), dtype="float32"), from_origin(X0, Y0, 1, 1))
    create_tif(tmp_path / "pad.tif", np.zeros((15, 25), dtype="float32"), from_origin(X0 - 2, Y0 + 2, 1, 1))

    with pytest.raises(WindowError):
        crop_tile(tmp_path / "org.tif", tmp_path / "pad.tif", tmp_path / "out.tif")
    assert not (tmp_path / "out.tif").exists()


def test_crop_directory_missing_input_dir(tile_dir, tmp_path):
    with pytest.raises(PathEnumerationError):
        crop_directory(tile_dir, tmp_path / "does_not_exist", tmp_path / "cropped")


def test_crop_tile_rejects_original_without_geotransform(tmp_path):
    create_bare_tif(tmp_path / "org.tif", np.zeros((20, 20), dtype="float32"))
    create_tif(tmp_path / "pad.tif", np.zeros((30, 30), dtype="float32"), from_origin(X0 - 5, Y0 + 5, 1, 1))

    with pytest.raises(TileOpenError) as info:
        crop_tile(tmp_path / "org.tif", tmp_path / "pad.tif", tmp_path / "out.tif")
    assert info.value.operation == "crop"
    assert not (tmp_path / "out.tif").exists()


@pytest.mark.parametrize("pixel", [0.1, 0.3, 30.0])
def test_round_trip_fractional_pixel_size(tmp_path, pixel):
    # 2x2 grid of 50x50 tiles far from the CRS origin
    x0, y0, size = 512345.0, 4612345.0, 50
    field = np.arange(4 * size * size, dtype="float32").reshape(2 * size, 2 * size)
    tiles = tmp_path / "tiles"
    tiles.mkdir()
    sources = []
    for r in range(2):
        for c in range(2):
            name = f"t{r}{c}.tif"
            data = np.ascontiguousarray(field[r * size:(r + 1) * size, c * size:(c + 1) * size])
            create_tif(tiles / name, data, from_origin(x0 + c * size * pixel, y0 - r * size * pixel, pixel, pixel))
            sources.append((name, c * size, r * size, size, size))
    write_vrt(tiles / "m.vrt", sources, 2 * size, 2 * size, (x0, pixel, 0.0, y0, 0.0, -pixel))

    pad_report = pad_directory(tiles, tmp_path / "padded", tiles / "m.vrt", 7)
    crop_report = crop_directory(tiles, tmp_path / "padded", tmp_path / "cropped")

    assert len(pad_report.succeeded) == len(crop_report.succeeded) == 4
    with rasterio.open(tmp_path / "padded" / "t11.tif") as ds:
        assert (ds.width, ds.height) == (size + 7, size + 7)
        np.testing.assert_array_equal(ds.read(1), field[size - 7:, size - 7:])
    for result in crop_report.succeeded:
        with rasterio.open(tiles / result.name) as org, rasterio.open(result.output) as out:
            assert out.transform == org.transform
            np.testing.assert_array_equal(out.read(1), org.read(1))
