"""
Image output: tone conversion and file writers.

Supports:
- Plain-text PPM (P3), one pixel per line
- Any format Pillow can write (PNG, BMP, ...)
"""

from __future__ import annotations
import sys
from pathlib import Path
from typing import TextIO
import numpy as np


def to_ldr(hdr_image: np.ndarray) -> np.ndarray:
    """Convert an averaged HDR image to 8-bit values.

    Applies gamma 2 (square root), clamps each channel to [0, 0.999]
    and quantizes with floor(256 * value).

    Args:
        hdr_image: HDR image array (float64)

    Returns:
        LDR image as uint8 array
    """
    corrected = np.sqrt(np.clip(hdr_image, 0.0, None))
    clamped = np.clip(corrected, 0.0, 0.999)
    return np.floor(256.0 * clamped).astype(np.uint8)


def write_ppm(stream: TextIO, ldr_image: np.ndarray) -> None:
    """Write an 8-bit image as plain PPM, top row first.

    Args:
        stream: Text stream to write to
        ldr_image: uint8 array of shape (height, width, 3)
    """
    height, width = ldr_image.shape[:2]
    stream.write(f"P3\n{width} {height}\n255\n")
    for row in ldr_image:
        for r, g, b in row:
            stream.write(f"{int(r)} {int(g)} {int(b)}\n")


def save_image(image: np.ndarray, filename: str) -> bool:
    """Save image to file.

    Float images are converted with ``to_ldr`` first. The image array
    itself is never modified.

    Args:
        image: Image array (HDR float or uint8)
        filename: Output filename (extension determines format)

    Returns:
        True on success, False if the file could not be written
    """
    from PIL import Image as PILImage

    if image.dtype == np.float64 or image.dtype == np.float32:
        image = to_ldr(image)

    path = Path(filename)
    try:
        if path.suffix.lower() == '.ppm':
            with open(path, 'w') as f:
                write_ppm(f, image)
        else:
            PILImage.fromarray(image).save(path)
    except (OSError, ValueError) as e:
        print(f"Warning: Could not write image {filename}: {e}", file=sys.stderr)
        return False

    return True
