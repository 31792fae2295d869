#!/usr/bin/env python3
"""
Crop padded tiles back to the footprint of the original tiles.

Each padded tile is matched by file name with a tile in the original
directory; the output gets the original's size, geotransform and CRS.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from buffer_config import BufferOptions
from buffer_errors import MissingCounterpartError, TileError, WindowError
from geo_offsets import crop_window
from raster_io import open_raster, read_band_window, read_metadata, write_single_band
from tile_batch import BatchReport, ensure_directory, list_raster_files, run_batch

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def crop_tile(
    original_path: PathLike,
    padded_path: PathLike,
    output_path: PathLike,
    options: Optional[BufferOptions] = None,
) -> Path:
    """Cut the footprint of ``original_path`` out of ``padded_path``.

    Raises:
        MissingCounterpartError: if ``original_path`` does not exist.
        TileError: on any other open, window, read or write failure.
    """
    original_path = Path(original_path)
    try:
        if not original_path.is_file():
            raise MissingCounterpartError(original_path)

        with open_raster(original_path) as org, open_raster(padded_path) as padded:
            original = read_metadata(org)
            padded_info = read_metadata(padded)
            try:
                window = crop_window(
                    original.geotransform, original.size, padded_info.geotransform, padded_info.size
                )
            except ValueError as exc:
                raise WindowError(padded_path, exc) from exc
            logger.debug("%s: padded window %s", original_path.name, tuple(window))
            data = read_band_window(padded, window)

        return write_single_band(output_path, data, original.geotransform, original.crs, options)
    except TileError as exc:
        exc.operation = "crop"
        raise


def crop_directory(
    original_dir: PathLike,
    input_dir: PathLike,
    output_dir: PathLike,
    options: Optional[BufferOptions] = None,
) -> BatchReport:
    """Crop every padded tile in ``input_dir`` against ``original_dir``.

    Args:
        original_dir: Directory of the original tiles, used for the extent.
        input_dir: Directory of padded (and possibly processed) tiles.
        output_dir: Directory for cropped tiles (created if missing).
        options: Suffix filter and output creation options.

    Raises:
        PathEnumerationError: if a directory cannot be listed or created.
    """
    options = options or BufferOptions()
    original_dir = Path(original_dir)
    output_dir = ensure_directory(output_dir)
    tiles = list_raster_files(input_dir, options.suffixes)

    logger.info("Cropping %d tiles from %s to the extent of %s", len(tiles), input_dir, original_dir)
    return run_batch(
        "crop",
        tiles,
        output_dir,
        lambda src, dst: crop_tile(original_dir / src.name, src, dst, options),
    )
