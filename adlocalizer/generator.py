import base64
import io
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Protocol

from .config import Settings
from .errors import DecodeError, GenerationTransportError
from .media import ImageData


logger = logging.getLogger(__name__)


class ImageGenerator(Protocol):
    """
    External image generation capability.

    `generate` returns None when the backend answered but produced no image,
    and raises GenerationTransportError when the call itself failed.
    """

    def generate(self, image: ImageData, prompt: str) -> Optional[ImageData]:
        ...


@dataclass
class ReplicateImageGenerator:
    """
    Image editing through a Replicate-hosted model (Gemini 2.5 Flash Image by
    default). The source image and prompt go in, the first image file in the
    output comes back.
    """

    api_token: str
    model: str = "google/nano-banana"
    output_format: str = "png"

    def generate(self, image: ImageData, prompt: str) -> Optional[ImageData]:
        import replicate

        client = replicate.Client(api_token=self.api_token)
        input_params = {
            "prompt": prompt,
            "image_input": [io.BytesIO(image.data)],
            "output_format": self.output_format,
        }

        logger.debug("Calling Replicate model %s", self.model)
        try:
            output = client.run(self.model, input=input_params)
        except Exception as exc:
            raise GenerationTransportError(
                f"Replicate call to {self.model} failed: {exc}",
                details={"model": self.model},
            ) from exc

        return _first_image(output)


@dataclass
class OpenAIImageGenerator:
    """Image editing through the OpenAI Images edit endpoint."""

    api_key: str
    model: str = "gpt-image-1"

    def generate(self, image: ImageData, prompt: str) -> Optional[ImageData]:
        from openai import OpenAI

        client = OpenAI(api_key=self.api_key)
        extension = image.mime_type.split("/")[-1]

        logger.debug("Calling OpenAI image model %s", self.model)
        try:
            response = client.images.edit(
                model=self.model,
                image=(f"source.{extension}", image.data, image.mime_type),
                prompt=prompt,
            )
        except Exception as exc:
            raise GenerationTransportError(
                f"OpenAI call to {self.model} failed: {exc}",
                details={"model": self.model},
            ) from exc

        for item in response.data or []:
            if item.b64_json:
                return _sniff(base64.b64decode(item.b64_json))
        return None


class DryRunImageGenerator:
    """Makes no network calls: logs the prompt and hands back the input image."""

    def generate(self, image: ImageData, prompt: str) -> Optional[ImageData]:
        logger.info("[dry-run] Would send prompt to image model:\n%s", prompt)
        return image


def build_image_generator(settings: Settings) -> ImageGenerator:
    if settings.backend == "openai":
        return OpenAIImageGenerator(api_key=settings.openai_api_key, model=settings.openai_model)
    if settings.backend == "dry-run":
        return DryRunImageGenerator()
    return ReplicateImageGenerator(api_token=settings.replicate_api_token, model=settings.replicate_model)


def _first_image(output: Any) -> Optional[ImageData]:
    """Return the first image found in a Replicate output (file, list or data URI)."""
    if output is None:
        return None

    if isinstance(output, (list, tuple)):
        candidates: Iterable[Any] = output
    else:
        candidates = [output]

    for item in candidates:
        if isinstance(item, (bytes, bytearray)):
            return _sniff(bytes(item))
        if isinstance(item, str):
            if item.startswith("data:"):
                try:
                    return ImageData.from_data_uri(item)
                except DecodeError as exc:
                    raise GenerationTransportError(f"Malformed inline image in response: {exc}") from exc
            logger.debug("Skipping non-inline output item: %s", item[:120])
            continue
        if hasattr(item, "read"):
            try:
                data = item.read()
            except Exception as exc:
                raise GenerationTransportError(f"Could not download generated image: {exc}") from exc
            if data:
                return _sniff(data)

    return None


def _sniff(data: bytes) -> Optional[ImageData]:
    try:
        return ImageData.sniff(data)
    except DecodeError as exc:
        logger.warning("Generated payload is not an image: %s", exc)
        return None
