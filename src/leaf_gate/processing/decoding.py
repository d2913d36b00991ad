"""Image decoding and downscaling to a bounded RGB pixel grid."""

from contextlib import contextmanager
import logging
from typing import Iterator

import cv2
import numpy as np

from leaf_gate.core.exceptions import DecodeError, RenderSurfaceError

logger = logging.getLogger(__name__)


@contextmanager
def decoded_surface(image_bytes: bytes) -> Iterator[np.ndarray]:
    """
    Decode image bytes into a full-resolution BGR buffer.

    The buffer only lives for the duration of the ``with`` block; references
    are dropped on every exit path, including decode failures.

    Raises:
        DecodeError: If the bytes are not a supported raster image
        RenderSurfaceError: If the decode buffer cannot be allocated
    """
    if not image_bytes:
        raise DecodeError("Image data is empty")

    raw = np.frombuffer(image_bytes, dtype=np.uint8)
    surface = None
    try:
        try:
            surface = cv2.imdecode(raw, cv2.IMREAD_COLOR)
        except MemoryError as e:
            raise RenderSurfaceError(
                "Not enough memory to decode image", details={"bytes": len(image_bytes)}
            ) from e
        except cv2.error as e:
            raise DecodeError(details={"opencv": str(e).strip()}) from e

        if surface is None or surface.size == 0:
            raise DecodeError(details={"bytes": len(image_bytes)})

        yield surface
    finally:
        surface = None
        raw = None


class ImageDecoder:
    """Turns arbitrary image bytes into a downscaled RGB grid."""

    def __init__(self, max_dimension: int = 256):
        self.max_dimension = max_dimension

    def target_size(self, width: int, height: int) -> tuple[int, int]:
        """Aspect-preserving size with the long edge at most ``max_dimension``."""
        scale = min(1.0, self.max_dimension / max(width, height))
        # Round half up so the result does not depend on banker's rounding
        target_w = max(1, int(width * scale + 0.5))
        target_h = max(1, int(height * scale + 0.5))
        return target_w, target_h

    def decode(self, image_bytes: bytes) -> np.ndarray:
        """
        Decode and downscale an image.

        Args:
            image_bytes: Encoded image (JPEG, PNG, WebP, BMP, TIFF, ...)

        Returns:
            Read-only uint8 array of shape (height, width, 3) in RGB order

        Raises:
            DecodeError: If the bytes cannot be decoded
            RenderSurfaceError: If a drawing surface cannot be allocated
        """
        with decoded_surface(image_bytes) as surface:
            height, width = surface.shape[:2]
            target_w, target_h = self.target_size(width, height)

            try:
                if (target_w, target_h) != (width, height):
                    # Area averaging is at least bilinear quality when shrinking
                    resized = cv2.resize(surface, (target_w, target_h), interpolation=cv2.INTER_AREA)
                else:
                    resized = surface
                grid = cv2.cvtColor(resized, cv2.COLOR_BGR2RGB)
            except MemoryError as e:
                raise RenderSurfaceError(
                    "Not enough memory to resample image",
                    details={"width": width, "height": height},
                ) from e
            except cv2.error as e:
                raise RenderSurfaceError(
                    "Could not allocate drawing surface",
                    details={"width": width, "height": height, "opencv": str(e).strip()},
                ) from e

        logger.debug("Decoded %dx%d image into %dx%d grid", width, height, target_w, target_h)

        grid = np.ascontiguousarray(grid)
        grid.flags.writeable = False
        return grid
