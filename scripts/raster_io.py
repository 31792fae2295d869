"""
rasterio-backed raster access used by the tile operations.

Every rasterio/GDAL failure is re-raised as one of the per-tile errors from
``buffer_errors`` so the batch loop can skip the tile.
"""
from __future__ import annotations

from pathlib import Path
from typing import NamedTuple, Optional, Tuple, Union

import numpy as np
import rasterio
from rasterio.crs import CRS
from rasterio.errors import RasterioError
from rasterio.io import DatasetReader
from rasterio.transform import Affine

from buffer_config import BufferOptions
from buffer_errors import IoReadError, IoWriteError, TileOpenError
from geo_offsets import GeoTransform, PixelWindow

PathLike = Union[str, Path]

# Everything is read and written as band 1, float32.
BAND = 1
DTYPE = "float32"


class RasterInfo(NamedTuple):
    width: int
    height: int
    geotransform: GeoTransform
    crs: Optional[CRS]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


def open_raster(path: PathLike) -> DatasetReader:
    try:
        return rasterio.open(path)
    except (RasterioError, OSError) as exc:
        raise TileOpenError(path, exc) from exc


def read_metadata(dataset: DatasetReader) -> RasterInfo:
    try:
        transform = dataset.transform
        info = RasterInfo(
            width=dataset.width,
            height=dataset.height,
            geotransform=tuple(transform.to_gdal()),
            crs=dataset.crs,
        )
    except RasterioError as exc:
        raise TileOpenError(dataset.name, exc) from exc
    # rasterio reports a missing geotransform as the identity transform
    if transform.is_identity:
        raise TileOpenError(dataset.name, "raster has no geotransform")
    return info


def read_band_window(dataset: DatasetReader, window: PixelWindow) -> np.ndarray:
    """Read ``window`` of band 1 as a (height, width) float32 array."""
    try:
        data = dataset.read(BAND, window=window.to_window(), out_dtype=DTYPE)
    except (RasterioError, OSError, ValueError) as exc:
        raise IoReadError(dataset.name, exc) from exc
    if data.shape != (window.height, window.width):
        raise IoReadError(
            dataset.name,
            f"expected {window.height}x{window.width} samples, got {data.shape[0]}x{data.shape[1]}",
        )
    return data


def write_single_band(
    path: PathLike,
    data: np.ndarray,
    geotransform: GeoTransform,
    crs: Optional[CRS],
    options: Optional[BufferOptions] = None,
) -> Path:
    """Create a one-band float32 GeoTIFF at ``path`` and write ``data`` at (0, 0)."""
    options = options or BufferOptions()
    path = Path(path)
    if path.exists() and not options.overwrite:
        raise IoWriteError(path, "output exists and overwrite is disabled")

    height, width = data.shape
    profile = {
        "driver": "GTiff",
        "height": height,
        "width": width,
        "count": 1,
        "dtype": DTYPE,
        "crs": crs,
        "transform": Affine.from_gdal(*geotransform),
    }
    profile.update(options.creation_options())

    try:
        with rasterio.open(path, "w", **profile) as dst:
            dst.write(data.astype(DTYPE, copy=False), BAND)
    except (RasterioError, OSError, ValueError) as exc:
        # drop the partial file so a later --no-overwrite run does not keep it
        if path.is_file():
            path.unlink()
        raise IoWriteError(path, exc) from exc
    return path
