#!/usr/bin/env python3
"""CLI for padding tiles from a mosaic and cropping them back.

Examples
--------
Pad every tile in data/ by 10 pixels using a VRT of the same tiles:
    vrt-buffer pad -i data -o output/padded -v data/data.vrt -p 10

Crop the (processed) padded tiles back to the original extents:
    vrt-buffer crop data output/padded output/trimmed
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from buffer_config import BufferOptions
from buffer_errors import VrtBufferError
from crop_tiles import crop_directory
from pad_tiles import pad_directory

logger = logging.getLogger("vrt_buffer")


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {text}")
    return value


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="vrt-buffer",
        description="Pad GeoTIFF tiles with pixels from adjacent tiles and crop them back.",
    )
    p.add_argument("--compress", default="LZW", help="GeoTIFF compression (default: LZW, NONE to disable)")
    p.add_argument("--tiled", action="store_true", help="Write tiled GeoTIFFs")
    p.add_argument("--no-overwrite", action="store_true", help="Skip tiles whose output already exists")
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    sub = p.add_subparsers(dest="command", required=True)

    pad = sub.add_parser(
        "pad",
        help="Pad the rasters with a border of pixels sourced from the adjacent rasters via a VRT",
    )
    pad.add_argument("-i", "--input", required=True, help="Input raster directory")
    pad.add_argument("-o", "--output", required=True, help="Output raster directory")
    pad.add_argument(
        "-v", "--vrt", required=True, help="VRT (or mosaic raster) covering the tiles and their neighbours"
    )
    pad.add_argument("-p", "--pad", required=True, type=_non_negative_int, help="Number of pixels to pad with")

    crop = sub.add_parser("crop", help="Crop processed rasters to the extent of the original rasters")
    crop.add_argument("original", help="Original raster directory, used for the extent to crop to")
    crop.add_argument("input", help="Input (padded) raster directory")
    crop.add_argument("output", help="Output raster directory")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s: %(message)s")

    options = BufferOptions(
        compress=args.compress,
        tiled=args.tiled,
        overwrite=not args.no_overwrite,
    )
    try:
        if args.command == "pad":
            report = pad_directory(args.input, args.output, args.vrt, args.pad, options)
        else:
            report = crop_directory(args.original, args.input, args.output, options)
    except VrtBufferError as exc:
        logger.error("%s", exc)
        return 1

    print(report.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
