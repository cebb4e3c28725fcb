import logging
from pathlib import Path
from typing import Iterable, List

from .core import LocaleResult
from .errors import DecodeError, SourceImageError
from .media import ImageData


logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}

MIME_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}


def load_source_image(path: Path) -> ImageData:
    """
    Read the uploaded creative from disk.

    This is the one failure that aborts the whole request, so every problem
    surfaces as SourceImageError:
    - missing file or unsupported extension
    - unreadable or empty file
    - bytes that do not decode as an image
    """
    if not path.is_file():
        raise SourceImageError(f"Source image not found: {path}", details={"path": str(path)})
    if path.suffix.lower() not in IMAGE_EXTENSIONS:
        raise SourceImageError(
            f"Unsupported image type '{path.suffix}'. Use one of: {', '.join(sorted(IMAGE_EXTENSIONS))}",
            details={"path": str(path)},
        )

    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SourceImageError(f"Could not read source image {path}: {exc}") from exc
    if not data:
        raise SourceImageError(f"Source image is empty: {path}", details={"path": str(path)})

    try:
        image = ImageData.sniff(data)
    except DecodeError as exc:
        raise SourceImageError(f"Source image {path.name} is not a valid image: {exc}") from exc

    logger.debug("Loaded source image %s (%s, %d bytes)", path.name, image.mime_type, len(data))
    return image


def save_results(results: Iterable[LocaleResult], output_root: Path) -> List[Path]:
    """
    Write every generated image under {output_root}/{locale-slug}/ and
    return the written paths in result order.
    """
    written: List[Path] = []
    for result in results:
        out_dir = output_root / _slugify(result.locale_id)
        out_dir.mkdir(parents=True, exist_ok=True)

        for ad_image in result.images:
            extension = MIME_EXTENSIONS.get(ad_image.image.mime_type, "png")
            filename = f"{result.locale_id}_{ad_image.size_id}.{extension}"
            output_path = out_dir / filename
            output_path.write_bytes(ad_image.image.data)
            written.append(output_path)

    return written


def _slugify(text: str) -> str:
    slug = "".join(ch.lower() if ch.isalnum() else "-" for ch in text)
    while "--" in slug:
        slug = slug.replace("--", "-")
    return slug.strip("-") or "item"
