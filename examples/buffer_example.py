"""Small example: two adjacent synthetic GeoTIFFs, a VRT over them, pad and crop.

Run from the repository root:
    python examples/buffer_example.py
"""
from pathlib import Path
import tempfile
import numpy as np
import rasterio
from rasterio.transform import from_origin
import sys

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "scripts"))
from crop_tiles import crop_directory  # type: ignore
from pad_tiles import pad_directory  # type: ignore


def _create_test_tif(path, arr, transform, crs="EPSG:32632", dtype="float32"):
    h, w = arr.shape
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=h,
        width=w,
        count=1,
        dtype=dtype,
        crs=crs,
        transform=transform,
    ) as dst:
        dst.write(arr.astype(dtype), 1)


def _write_vrt(path, names, tile_size):
    sources = "".join(
        f"""
    <SimpleSource>
      <SourceFilename relativeToVRT="1">{name}</SourceFilename>
      <SourceBand>1</SourceBand>
      <SrcRect xOff="0" yOff="0" xSize="{tile_size}" ySize="{tile_size}"/>
      <DstRect xOff="{i * tile_size}" yOff="0" xSize="{tile_size}" ySize="{tile_size}"/>
    </SimpleSource>"""
        for i, name in enumerate(names)
    )
    Path(path).write_text(
        f"""<VRTDataset rasterXSize="{tile_size * len(names)}" rasterYSize="{tile_size}">
  <SRS>EPSG:32632</SRS>
  <GeoTransform>500000.0, 10.0, 0.0, 4600000.0, 0.0, -10.0</GeoTransform>
  <VRTRasterBand dataType="Float32" band="1">{sources}
  </VRTRasterBand>
</VRTDataset>
"""
    )


def main():
    tmp = Path(tempfile.mkdtemp(prefix="buffer_example_"))
    tiles = tmp / "tiles"
    tiles.mkdir()

    a1 = np.ones((100, 100), dtype="float32") * 10
    a2 = np.ones((100, 100), dtype="float32") * 20
    _create_test_tif(tiles / "west.tif", a1, from_origin(500000, 4600000, 10, 10))
    _create_test_tif(tiles / "east.tif", a2, from_origin(501000, 4600000, 10, 10))
    _write_vrt(tiles / "tiles.vrt", ["west.tif", "east.tif"], 100)
    print("Created test rasters in:", tiles)

    padded = tmp / "padded"
    report = pad_directory(tiles, padded, tiles / "tiles.vrt", 10)
    print(report.summary())
    with rasterio.open(padded / "west.tif") as ds:
        print("west.tif padded to", ds.width, "x", ds.height, "right column value:", ds.read(1)[50, -1])

    # a moving-window computation on the padded tiles would go here

    report = crop_directory(tiles, padded, tmp / "cropped")
    print(report.summary())
    print("Cropped tiles written to:", tmp / "cropped")


if __name__ == "__main__":
    main()
