import io
import logging
from typing import Dict, Tuple

from PIL import Image

from .errors import RenderError
from .media import DEFAULT_MIME_TYPE, ImageData


logger = logging.getLogger(__name__)

# Formats the resizer writes back in the source's own encoding; anything else becomes PNG.
SAVE_FORMATS: Dict[str, str] = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/webp": "WEBP",
}


def resize_cover(image: ImageData, width: int, height: int) -> ImageData:
    """
    Resize + center-crop `image` to exactly `width` x `height` ("cover" fit).

    - source relatively taller: scale to the target width, crop top and bottom equally
    - source relatively wider: scale to the target height, crop left and right equally
    - same aspect ratio: scale directly

    Purely geometric; the same input bytes and dimensions always give the same
    output bytes. Raises DecodeError for undecodable input and RenderError
    when the output cannot be produced.
    """
    if width <= 0 or height <= 0:
        raise RenderError(
            f"Invalid target size {width}x{height}",
            details={"width": width, "height": height},
        )

    src = image.open()
    scaled_size, box = _cover_geometry(src.size, (width, height))

    mime_type = image.mime_type if image.mime_type in SAVE_FORMATS else DEFAULT_MIME_TYPE
    fmt = SAVE_FORMATS[mime_type]

    try:
        img = src.convert(_output_mode(src, fmt))
        if img.size != scaled_size:
            img = img.resize(scaled_size, Image.LANCZOS)
        img = img.crop(box)

        buffer = io.BytesIO()
        img.save(buffer, format=fmt)
    except (OSError, ValueError, MemoryError) as exc:
        raise RenderError(
            f"Could not render {width}x{height} image: {exc}",
            details={"width": width, "height": height, "format": fmt},
        ) from exc

    logger.debug("Resized %sx%s -> %sx%s (%s)", src.width, src.height, width, height, fmt)
    return ImageData(data=buffer.getvalue(), mime_type=mime_type)


def _cover_geometry(
    source: Tuple[int, int],
    target: Tuple[int, int],
) -> Tuple[Tuple[int, int], Tuple[int, int, int, int]]:
    """Return the scaled size and the centered crop box for a cover fit."""
    src_w, src_h = source
    width, height = target

    # Compare aspect ratios with integer cross-multiplication.
    if src_w * height < width * src_h:
        scaled_w = width
        scaled_h = max(height, round(width * src_h / src_w))
    elif src_w * height > width * src_h:
        scaled_h = height
        scaled_w = max(width, round(height * src_w / src_h))
    else:
        scaled_w, scaled_h = width, height

    left = (scaled_w - width) // 2
    top = (scaled_h - height) // 2
    return (scaled_w, scaled_h), (left, top, left + width, top + height)


def _output_mode(img: Image.Image, fmt: str) -> str:
    if fmt == "JPEG":
        return "RGB"
    has_alpha = img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info
    return "RGBA" if has_alpha else "RGB"
