"""Shared fixtures: a 3x3 grid of small GeoTIFF tiles and a VRT mosaic over them."""
from pathlib import Path
import sys

import numpy as np
import pytest
import rasterio
from rasterio.transform import from_origin

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "scripts"))

TILE = 100
GRID = 3
# world origin of the mosaic (top-left), 1 unit pixels
X0, Y0 = 1000.0, 2000.0
CRS = "EPSG:32632"


def create_tif(path, data, transform, crs=CRS):
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=data.shape[0],
        width=data.shape[1],
        count=1,
        dtype=data.dtype.name,
        crs=crs,
        transform=transform,
    ) as dst:
        dst.write(data, 1)


def write_vrt(path, sources, width, height, geotransform):
    """Write a minimal single-band Float32 VRT.

    ``sources`` is a list of (file name relative to the VRT, x_off, y_off, w, h).
    """
    simple = "".join(
        f"""
    <SimpleSource>
      <SourceFilename relativeToVRT="1">{name}</SourceFilename>
      <SourceBand>1</SourceBand>
      <SrcRect xOff="0" yOff="0" xSize="{w}" ySize="{h}"/>
      <DstRect xOff="{x}" yOff="{y}" xSize="{w}" ySize="{h}"/>
    </SimpleSource>"""
        for name, x, y, w, h in sources
    )
    gt = ", ".join(repr(float(v)) for v in geotransform)
    Path(path).write_text(
        f"""<VRTDataset rasterXSize="{width}" rasterYSize="{height}">
  <GeoTransform>{gt}</GeoTransform>
  <VRTRasterBand dataType="Float32" band="1">{simple}
  </VRTRasterBand>
</VRTDataset>
"""
    )


@pytest.fixture
def field():
    """Mosaic-wide pixel values; every pixel distinct and exact in float32."""
    n = TILE * GRID
    return np.arange(n * n, dtype="float32").reshape(n, n)


@pytest.fixture
def tile_dir(tmp_path, field):
    """Directory holding tile_<row>_<col>.tif plus mosaic.vrt over all tiles."""
    tiles = tmp_path / "tiles"
    tiles.mkdir()
    sources = []
    for r in range(GRID):
        for c in range(GRID):
            name = f"tile_{r}_{c}.tif"
            data = field[r * TILE:(r + 1) * TILE, c * TILE:(c + 1) * TILE]
            transform = from_origin(X0 + c * TILE, Y0 - r * TILE, 1, 1)
            create_tif(tiles / name, np.ascontiguousarray(data), transform)
            sources.append((name, c * TILE, r * TILE, TILE, TILE))
    write_vrt(tiles / "mosaic.vrt", sources, TILE * GRID, TILE * GRID, (X0, 1.0, 0.0, Y0, 0.0, -1.0))
    return tiles


@pytest.fixture
def mosaic_path(tile_dir):
    return tile_dir / "mosaic.vrt"


def create_bare_tif(path, data):
    """GeoTIFF with no geotransform and no CRS."""
    with rasterio.open(
        path, "w", driver="GTiff", height=data.shape[0], width=data.shape[1], count=1, dtype=data.dtype.name
    ) as dst:
        dst.write(data, 1)
