"""
Exception hierarchy for tile padding and cropping.

Directory-level failures (``PathEnumerationError``, ``MosaicOpenError``) are
fatal to a batch. Everything deriving from ``TileError`` only concerns one
tile: the batch loop logs it and moves on to the next file.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class VrtBufferError(Exception):
    """Root exception class"""


class PathEnumerationError(VrtBufferError):
    """Raised when a directory cannot be listed or created."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        msg = f"Cannot access directory {self.path}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class MosaicOpenError(VrtBufferError):
    """Raised when the mosaic (VRT) used as padding source cannot be opened."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        msg = f"Cannot open mosaic {self.path}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class TileError(VrtBufferError):
    """Failure affecting a single tile.

    Args:
        path: File the failure relates to.
        cause: Underlying exception or a plain description.
        operation: ``"pad"`` or ``"crop"``, filled in by the tile operation.
    """

    reason = "tile failure"

    def __init__(
        self,
        path: Union[str, Path],
        cause: Union[BaseException, str, None] = None,
        operation: Optional[str] = None,
    ):
        self.path = Path(path)
        self.cause = cause
        self.operation = operation
        super().__init__(self._message())

    def _message(self) -> str:
        msg = f"{self.reason}: {self.path}"
        if self.cause is not None:
            msg += f" ({self.cause})"
        return msg

    def __str__(self) -> str:
        if self.operation:
            return f"[{self.operation}] {self._message()}"
        return self._message()


class TileOpenError(TileError):
    """Raised when a source raster or its metadata cannot be read."""

    reason = "cannot open raster"


class IoReadError(TileError):
    """Raised when a windowed band read fails."""

    reason = "cannot read raster window"


class IoWriteError(TileError):
    """Raised when the output raster cannot be created or written."""

    reason = "cannot write raster"


class MissingCounterpartError(TileError):
    """Raised when a padded tile has no same-named original to crop against."""

    reason = "no original tile"


class WindowError(TileError):
    """Raised when the computed pixel window lies outside the source raster."""

    reason = "window outside raster"
