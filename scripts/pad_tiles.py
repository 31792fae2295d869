#!/usr/bin/env python3
"""
Pad raster tiles with border pixels taken from a mosaic.

Features
- Reads every GeoTIFF tile of a directory.
- Extends each tile by a fixed number of pixels on every side, sourcing the
  extra pixels from neighbouring tiles through a mosaic (usually a VRT).
- Opens the mosaic once per batch and shares it read-only between tiles.
- Tiles on the mosaic boundary get a thinner margin on the outer side.
- A tile that cannot be padded is logged and skipped.

The padded tiles can later be trimmed back with ``crop_tiles``.
"""
from __future__ import annotations

import logging
import numbers
from pathlib import Path
from typing import Optional, Union

from rasterio.io import DatasetReader

from buffer_config import BufferOptions
from buffer_errors import MosaicOpenError, TileError, TileOpenError, WindowError
from geo_offsets import padded_window
from raster_io import open_raster, read_band_window, read_metadata, write_single_band
from tile_batch import BatchReport, ensure_directory, list_raster_files, run_batch

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def pad_tile(
    tile_path: PathLike,
    output_path: PathLike,
    margin: int,
    mosaic: DatasetReader,
    options: Optional[BufferOptions] = None,
) -> Path:
    """Write ``tile_path`` padded by ``margin`` pixels to ``output_path``.

    Args:
        tile_path: Tile to pad; only its footprint, geotransform and CRS are used.
        output_path: Output GeoTIFF path.
        margin: Pixels to add on every side.
        mosaic: Open mosaic covering the tile and its neighbours. Not closed here.
        options: Output creation options.

    Returns:
        Path to the written tile.

    Raises:
        TileError: on any open, window, read or write failure for this tile.
    """
    try:
        with open_raster(tile_path) as src:
            tile = read_metadata(src)

        mosaic_info = read_metadata(mosaic)
        try:
            window, geotransform = padded_window(
                tile.geotransform, tile.size, margin, mosaic_info.geotransform, mosaic_info.size
            )
        except ValueError as exc:
            raise WindowError(tile_path, exc) from exc
        logger.debug("%s: mosaic window %s", Path(tile_path).name, tuple(window))

        data = read_band_window(mosaic, window)
        return write_single_band(output_path, data, geotransform, tile.crs, options)
    except TileError as exc:
        exc.operation = "pad"
        raise


def pad_directory(
    input_dir: PathLike,
    output_dir: PathLike,
    mosaic_path: PathLike,
    margin: int,
    options: Optional[BufferOptions] = None,
) -> BatchReport:
    """Pad every tile in ``input_dir`` and write the results to ``output_dir``.

    Args:
        input_dir: Directory of original tiles.
        output_dir: Directory for padded tiles (created if missing).
        mosaic_path: Mosaic (VRT or any raster) of the original tiles.
        margin: Non-negative number of pixels to add on every side.
        options: Suffix filter and output creation options.

    Returns:
        Per-tile results; skipped tiles are listed under ``failed``.

    Raises:
        ValueError: if ``margin`` is not a non-negative integer.
        PathEnumerationError: if a directory cannot be listed or created.
        MosaicOpenError: if the mosaic cannot be opened.
    """
    if isinstance(margin, bool) or not isinstance(margin, numbers.Integral) or margin < 0:
        raise ValueError(f"margin must be a non-negative integer, got {margin!r}")
    margin = int(margin)
    options = options or BufferOptions()

    output_dir = ensure_directory(output_dir)
    tiles = list_raster_files(input_dir, options.suffixes)

    try:
        mosaic = open_raster(mosaic_path)
    except TileOpenError as exc:
        raise MosaicOpenError(mosaic_path, exc.cause) from exc

    with mosaic:
        logger.info(
            "Padding %d tiles from %s by %d pixels using %s", len(tiles), input_dir, margin, mosaic_path
        )
        return run_batch(
            "pad",
            tiles,
            output_dir,
            lambda src, dst: pad_tile(src, dst, margin, mosaic, options),
        )
