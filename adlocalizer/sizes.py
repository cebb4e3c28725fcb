from typing import Iterable, List, Tuple

from .errors import MalformedSizeId


Dimensions = Tuple[int, int]

# Banner takes 2/5 of the image height.
BANNER_RATIO = (2, 5)


def parse_size_id(size_id: str) -> Dimensions:
    """
    Parse a size id like '1080x1350' into (width, height).

    Raises MalformedSizeId unless the id holds exactly two positive integers.
    """
    parts = size_id.split("x")
    if len(parts) != 2:
        raise MalformedSizeId(size_id)
    if not all(p.isascii() and p.isdigit() for p in parts):
        raise MalformedSizeId(size_id)
    width, height = (int(p) for p in parts)
    if width <= 0 or height <= 0:
        raise MalformedSizeId(size_id)
    return width, height


def pixel_area(size_id: str) -> int:
    width, height = parse_size_id(size_id)
    return width * height


def sort_by_area(size_ids: Iterable[str]) -> List[str]:
    """
    Order size ids by pixel area, largest first.

    `sorted` is stable, so equal areas keep the caller's selection order.
    """
    return sorted(size_ids, key=pixel_area, reverse=True)


def banner_height(height: int) -> int:
    """Height of the CTA banner for an image `height` pixels tall, rounded half-up."""
    num, den = BANNER_RATIO
    return (2 * height * num + den) // (2 * den)
