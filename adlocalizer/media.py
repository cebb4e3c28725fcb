import base64
import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError


DEFAULT_MIME_TYPE = "image/png"

# Pillow formats whose files are plain images of another type (MPO is JPEG plus MPF frames).
MIME_ALIASES = {
    "MPO": "image/jpeg",
}


@dataclass(frozen=True)
class ImageData:
    """Encoded image bytes plus their MIME type."""

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE

    @property
    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    @classmethod
    def from_data_uri(cls, uri: str) -> "ImageData":
        header, _, payload = uri.partition(",")
        if not header.startswith("data:") or not header.endswith(";base64"):
            raise DecodeError("Not a base64 data URI", details={"header": header[:64]})
        mime_type = header[len("data:"):-len(";base64")] or DEFAULT_MIME_TYPE
        try:
            data = base64.b64decode(payload, validate=True)
        except ValueError as exc:
            raise DecodeError(f"Invalid base64 payload: {exc}") from exc
        return cls(data=data, mime_type=mime_type)

    @classmethod
    def sniff(cls, data: bytes) -> "ImageData":
        """Wrap raw bytes, detecting the MIME type from the decoded format."""
        return cls(data=data, mime_type=detect_mime_type(data))

    def open(self) -> Image.Image:
        """Decode into a loaded PIL image; raises DecodeError on failure."""
        try:
            img = Image.open(io.BytesIO(self.data))
            img.load()
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise DecodeError(
                f"Could not decode {self.mime_type} image: {exc}",
                details={"bytes": len(self.data)},
            ) from exc
        return img


def detect_mime_type(data: bytes) -> str:
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError) as exc:
        raise DecodeError(f"Unrecognised image data: {exc}") from exc
    fmt = fmt or ""
    if fmt in MIME_ALIASES:
        return MIME_ALIASES[fmt]
    return Image.MIME.get(fmt, DEFAULT_MIME_TYPE)
