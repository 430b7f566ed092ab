import base64
from io import BytesIO
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from errors import CodecError

PNG_DATA_URI_PREFIX = "data:image/png;base64,"

_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    ValueError,
    SyntaxError,
)


def decode_image(data: bytes) -> Image.Image:
    """Decode JPEG/PNG/WebP/... bytes into a fully loaded RGBA image."""
    if not data:
        raise CodecError("Cannot decode image: empty payload")
    try:
        with Image.open(BytesIO(data)) as img:
            return img.convert("RGBA")
    except _DECODE_ERRORS as e:
        raise CodecError(f"Cannot decode image: {e}") from e


def cover_fit(image: Image.Image, size: Tuple[int, int]) -> Image.Image:
    """
    Resize so `size` is completely filled, cropping the overflow
    symmetrically around the center. Never pads, never distorts.
    """
    width, height = size
    if width <= 0 or height <= 0:
        raise CodecError(f"Invalid resize target: {width}x{height}")
    if image.width <= 0 or image.height <= 0:
        raise CodecError(f"Invalid source size: {image.width}x{image.height}")
    try:
        return ImageOps.fit(
            image,
            (width, height),
            method=Image.LANCZOS,
            centering=(0.5, 0.5),
        )
    except (OSError, ValueError, MemoryError) as e:
        raise CodecError(f"Cannot resize image to {width}x{height}: {e}") from e


def overlay_at(base: Image.Image, layer: Image.Image, position: Tuple[int, int]) -> Image.Image:
    """
    Source-over composite `layer` onto a copy of `base` with the layer's
    top-left corner at `position`. The result keeps the base's size.
    """
    canvas = base.convert("RGBA") if base.mode != "RGBA" else base.copy()
    top = layer.convert("RGBA") if layer.mode != "RGBA" else layer
    canvas.alpha_composite(top, dest=tuple(position))
    return canvas


def encode_png(image: Image.Image) -> bytes:
    buf = BytesIO()
    try:
        image.save(buf, format="PNG")
    except (OSError, ValueError) as e:
        raise CodecError(f"Cannot encode PNG: {e}") from e
    return buf.getvalue()


def to_data_uri(png_bytes: bytes) -> str:
    return PNG_DATA_URI_PREFIX + base64.b64encode(png_bytes).decode("ascii")


def data_uri_to_bytes(data_uri: str) -> bytes:
    if not data_uri.startswith(PNG_DATA_URI_PREFIX):
        raise CodecError("Not a PNG data URI")
    return base64.b64decode(data_uri[len(PNG_DATA_URI_PREFIX):])


def data_uri_to_image(data_uri: str) -> Image.Image:
    return decode_image(data_uri_to_bytes(data_uri))
