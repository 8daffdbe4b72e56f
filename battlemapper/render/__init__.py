"""Image output for generated battle maps."""

from .png import (
    encode_base64,
    encode_png,
    image_size,
    render_image,
    render_pixels,
    save_png,
)

__all__ = [
    "encode_base64",
    "encode_png",
    "image_size",
    "render_image",
    "render_pixels",
    "save_png",
]
