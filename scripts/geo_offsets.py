"""
Geotransform and pixel-offset arithmetic shared by padding and cropping.

Geotransforms use the GDAL coefficient order::

    (x_origin, pixel_width, x_rotation, y_origin, y_rotation, pixel_height)

Grids are assumed axis-aligned and co-registered, so rotation terms are
carried along but never used for offsets. Nothing in here touches a file.
"""
from __future__ import annotations

import math
from typing import NamedTuple, Sequence, Tuple

from rasterio.windows import Window

GeoTransform = Tuple[float, float, float, float, float, float]

# quotients this close to an integer are treated as that integer
SNAP_TOLERANCE = 1e-6


class PixelWindow(NamedTuple):
    col_off: int
    row_off: int
    width: int
    height: int

    def to_window(self) -> Window:
        return Window(self.col_off, self.row_off, self.width, self.height)

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def _snap(value: float) -> float:
    nearest = round(value)
    if abs(value - nearest) < SNAP_TOLERANCE:
        return float(nearest)
    return value


def expand_origin(geotransform: Sequence[float], margin: int) -> GeoTransform:
    """Geotransform of a raster padded by ``margin`` pixels on every side."""
    x0, pw, xr, y0, yr, ph = geotransform
    return (x0 - margin * pw, pw, xr, y0 - margin * ph, yr, ph)


def raw_pixel_offset(x: float, y: float, reference: Sequence[float]) -> Tuple[int, int]:
    """Floored pixel position of world point (x, y) in ``reference``, may be negative."""
    col = math.floor(_snap((x - reference[0]) / reference[1]))
    row = math.floor(_snap((reference[3] - y) / abs(reference[5])))
    return col, row


def world_to_pixel_offset(x: float, y: float, reference: Sequence[float]) -> Tuple[int, int]:
    """Pixel of ``reference`` at or just before world point (x, y), clamped at 0.

    A point above or left of the reference raster maps to column/row 0, so a
    tile on the mosaic boundary simply gets a thinner margin on that side.
    """
    col, row = raw_pixel_offset(x, y, reference)
    return max(col, 0), max(row, 0)


def clamp_window(
    candidate_width: int,
    candidate_height: int,
    reference_size: Tuple[int, int],
    offset: Tuple[int, int],
) -> Tuple[int, int]:
    """Limit a window starting at ``offset`` to what ``reference_size`` still holds."""
    ref_width, ref_height = reference_size
    col, row = offset
    return min(ref_width - col, candidate_width), min(ref_height - row, candidate_height)


def padded_window(
    tile_geotransform: Sequence[float],
    tile_size: Tuple[int, int],
    margin: int,
    mosaic_geotransform: Sequence[float],
    mosaic_size: Tuple[int, int],
) -> Tuple[PixelWindow, GeoTransform]:
    """Mosaic window covering a tile plus ``margin`` and the geotransform of that window.

    Returns:
        The window to read from the mosaic and the geotransform the padded
        output must carry. Where the expanded origin falls outside the mosaic
        the window starts at 0 and both its size and origin shrink by the
        pixels that were cut off, keeping the output aligned with the tile.

    Raises:
        ValueError: if ``margin`` is negative or the window is empty.
    """
    if margin < 0:
        raise ValueError(f"margin must be non-negative, got {margin}")

    expanded = expand_origin(tile_geotransform, margin)
    raw_col, raw_row = raw_pixel_offset(expanded[0], expanded[3], mosaic_geotransform)
    col, row = world_to_pixel_offset(expanded[0], expanded[3], mosaic_geotransform)
    cut_cols, cut_rows = col - raw_col, row - raw_row

    width, height = clamp_window(
        tile_size[0] + 2 * margin - cut_cols,
        tile_size[1] + 2 * margin - cut_rows,
        mosaic_size,
        (col, row),
    )
    window = PixelWindow(col, row, width, height)
    if window.is_empty():
        raise ValueError(f"tile does not intersect the mosaic (window {tuple(window)})")

    x0, pw, xr, y0, yr, ph = expanded
    out_geotransform = (x0 + cut_cols * pw, pw, xr, y0 + cut_rows * ph, yr, ph)
    return window, out_geotransform


def crop_offset(original: Sequence[float], padded: Sequence[float]) -> Tuple[int, int]:
    """Offset of the original tile's origin inside a padded tile.

    Truncates toward zero instead of flooring like the mosaic offset does;
    for a tile padded on this grid the quotient is already a whole number.
    """
    col = int(_snap((original[0] - padded[0]) / padded[1]))
    row = int(_snap((padded[3] - original[3]) / abs(padded[5])))
    return col, row


def crop_window(
    original_geotransform: Sequence[float],
    original_size: Tuple[int, int],
    padded_geotransform: Sequence[float],
    padded_size: Tuple[int, int],
) -> PixelWindow:
    """Window of the padded tile matching the original footprint exactly.

    Raises:
        ValueError: if the footprint is not fully inside the padded tile.
    """
    col, row = crop_offset(original_geotransform, padded_geotransform)
    width, height = original_size
    if col < 0 or row < 0 or col + width > padded_size[0] or row + height > padded_size[1]:
        raise ValueError(
            f"original footprint {(col, row, width, height)} exceeds padded tile "
            f"of size {tuple(padded_size)}"
        )
    return PixelWindow(col, row, width, height)
