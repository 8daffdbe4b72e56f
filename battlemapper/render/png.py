"""PNG rendering of generated battle maps.

Each cell becomes a ``tile_size x tile_size`` block of its state's colour
(see ``battlemapper.environment.cell_types`` for the mapping), and a one
pixel grey line runs along the top and left edge of every tile so the map
can be used directly on a virtual tabletop.
"""

from __future__ import annotations

import base64
import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image as PILImage

from battlemapper import config
from battlemapper.environment.cell_types import get_color_map
from battlemapper.environment.generators.result import GenerationResult
from battlemapper.types import ColorRGB, PixelSize

logger = logging.getLogger(__name__)


def image_size(
    result: GenerationResult, tile_size: int = config.TILE_SIZE
) -> PixelSize:
    """Pixel dimensions of the image ``render_image`` would produce."""
    return (result.width * tile_size, result.height * tile_size)


def render_pixels(
    result: GenerationResult,
    tile_size: int = config.TILE_SIZE,
    grid_color: ColorRGB | None = config.GRID_LINE_COLOR,
) -> np.ndarray:
    """Render a result into an RGB pixel array.

    Args:
        result: The generated map.
        tile_size: Side of one cell in pixels.
        grid_color: Colour of the grid lines, or None for no grid.

    Returns:
        A ``(height * tile_size, width * tile_size, 3)`` uint8 array in
        row-major image order.

    Raises:
        ValueError: If ``tile_size`` is not positive.
    """
    if tile_size <= 0:
        raise ValueError(f"tile_size must be positive, got {tile_size}")

    # cells are indexed [x, y]; images are indexed [row, column].
    colors = get_color_map(result.cells).transpose(1, 0, 2)
    pixels = np.repeat(np.repeat(colors, tile_size, axis=0), tile_size, axis=1)

    if grid_color is not None and tile_size > 1:
        pixels[::tile_size, :] = grid_color
        pixels[:, ::tile_size] = grid_color
    return np.ascontiguousarray(pixels, dtype=np.uint8)


def render_image(
    result: GenerationResult,
    tile_size: int = config.TILE_SIZE,
    grid_color: ColorRGB | None = config.GRID_LINE_COLOR,
) -> PILImage.Image:
    """Render a result into a Pillow RGB image."""
    return PILImage.fromarray(render_pixels(result, tile_size, grid_color))


def encode_png(image: PILImage.Image) -> bytes:
    """Encode an image as PNG bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def encode_base64(image: PILImage.Image) -> str:
    """Encode an image as base64 PNG text, as served to the web front end."""
    return base64.b64encode(encode_png(image)).decode("ascii")


def save_png(
    result: GenerationResult,
    path: str | Path,
    tile_size: int = config.TILE_SIZE,
) -> Path:
    """Render ``result`` and write it to ``path`` as PNG.

    Returns:
        The path written.
    """
    path = Path(path)
    image = render_image(result, tile_size)
    path.write_bytes(encode_png(image))
    logger.info(f"Wrote {image.width}x{image.height} map to {path}")
    return path
