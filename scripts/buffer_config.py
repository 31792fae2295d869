"""Options shared by the pad and crop batches."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

# Raster suffixes picked up from a tile directory (case-sensitive, no dot).
RASTER_SUFFIXES = ("tif", "tiff")


@dataclass(frozen=True)
class BufferOptions:
    """Settings passed explicitly into ``pad_directory`` / ``crop_directory``.

    Args:
        suffixes: File suffixes treated as tiles; everything else is ignored.
        compress: GeoTIFF compression for outputs (default: LZW).
        tiled: Create tiled GeoTIFF outputs.
        bigtiff: BIGTIFF creation option.
        overwrite: Replace existing output files. When False an existing
            output makes that tile fail and get skipped.
    """

    suffixes: Tuple[str, ...] = RASTER_SUFFIXES
    compress: str = "LZW"
    tiled: bool = False
    bigtiff: str = "IF_SAFER"
    overwrite: bool = True

    def creation_options(self) -> Dict[str, object]:
        opts: Dict[str, object] = {"BIGTIFF": self.bigtiff}
        if self.compress and self.compress.upper() != "NONE":
            opts["compress"] = self.compress
        if self.tiled:
            opts["tiled"] = True
        return opts
