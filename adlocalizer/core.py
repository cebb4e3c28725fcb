import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Tuple

from .errors import (
    GenerationTransportError,
    LocalizationError,
    MalformedSizeId,
    NoImageProduced,
)
from .generator import ImageGenerator
from .media import ImageData
from .prompts import build_prompt
from .reference import AD_SIZES_BY_ID, LOCALES_BY_ID, AdSizeSpec, Locale
from .render import resize_cover
from .sizes import parse_size_id, sort_by_area


logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    # Generate one master per locale, derive every size by center-crop resizing.
    RESIZE = "resize"
    # Generate one master per locale, ask the model to adapt it to every other size.
    REGENERATE = "regenerate"


@dataclass(frozen=True)
class GenerationRequest:
    image: ImageData
    locale_ids: Tuple[str, ...]
    size_ids: Tuple[str, ...]
    cta_text: str

    @classmethod
    def create(
        cls,
        image: ImageData,
        locale_ids: Iterable[str],
        size_ids: Iterable[str],
        cta_text: str,
    ) -> "GenerationRequest":
        """Build a request, dropping repeated ids while keeping selection order."""
        return cls(
            image=image,
            locale_ids=_unique(locale_ids),
            size_ids=_unique(size_ids),
            cta_text=cta_text.strip(),
        )


@dataclass(frozen=True)
class GeneratedImage:
    size_id: str
    name: str
    image: ImageData

    @property
    def data_uri(self) -> str:
        return self.image.data_uri


@dataclass
class LocaleResult:
    locale_id: str
    locale_name: str
    images: List[GeneratedImage] = field(default_factory=list)


@dataclass(frozen=True)
class _ResolvedSize:
    spec: AdSizeSpec
    width: int
    height: int


class LocalizationPipeline:
    """
    Orchestrates localized ad generation:
    - resolve the requested ad sizes and pick the largest as the master size
    - for each locale:
        * generate one localized master image from the uploaded creative
        * derive every other size from it (resize or regenerate strategy)
        * collect whatever succeeded; a failing size or locale never stops the others
    - return per-locale results in selection order
    """

    def __init__(
        self,
        generator: ImageGenerator,
        strategy: Strategy = Strategy.RESIZE,
        locales: Mapping[str, Locale] = LOCALES_BY_ID,
        ad_sizes: Mapping[str, AdSizeSpec] = AD_SIZES_BY_ID,
    ) -> None:
        self.generator = generator
        self.strategy = Strategy(strategy)
        self.locales = locales
        self.ad_sizes = ad_sizes

    def run(self, request: GenerationRequest) -> List[LocaleResult]:
        sizes = self._resolve_sizes(request.size_ids)
        if not sizes:
            logger.info("No usable ad sizes requested; nothing to generate.")
            return []

        # Master candidates: area-descending, ties keep selection order.
        by_area = [sizes[size_id] for size_id in sort_by_area(sizes)]

        results: List[LocaleResult] = []
        for locale_id in request.locale_ids:
            locale = self.locales.get(locale_id)
            if locale is None:
                logger.debug("Skipping unknown locale '%s'", locale_id)
                continue

            logger.info("Localizing for %s (%s)", locale.name, self.strategy.value)
            produced = self._localize(locale, request, by_area)
            results.append(
                LocaleResult(
                    locale_id=locale.id,
                    locale_name=locale.name,
                    images=list(produced.values()),
                )
            )

        return assemble_results(results, request.locale_ids, list(sizes))

    def _resolve_sizes(self, size_ids: Iterable[str]) -> Dict[str, _ResolvedSize]:
        resolved: Dict[str, _ResolvedSize] = {}
        for size_id in size_ids:
            spec = self.ad_sizes.get(size_id)
            if spec is None:
                logger.debug("Skipping unknown ad size '%s'", size_id)
                continue
            try:
                width, height = parse_size_id(size_id)
            except MalformedSizeId as exc:
                logger.warning("Skipping ad size: %s", exc)
                continue
            resolved[size_id] = _ResolvedSize(spec=spec, width=width, height=height)
        return resolved

    def _localize(
        self,
        locale: Locale,
        request: GenerationRequest,
        by_area: List[_ResolvedSize],
    ) -> Dict[str, GeneratedImage]:
        """
        Produce images for one locale, keyed by size id.

        An empty dict means the locale produced nothing (its master failed, or
        every derived size failed).
        """
        master_size = by_area[0]
        try:
            master = self._generate(locale, request.cta_text, request.image, master_size, is_first_size=True)
        except LocalizationError as exc:
            logger.warning(
                "Master %s for %s failed, dropping locale: %s",
                master_size.spec.id,
                locale.id,
                exc,
            )
            return {}

        produced: Dict[str, GeneratedImage] = {}

        if self.strategy is Strategy.RESIZE:
            # The master size goes through the resizer as well to pin exact pixel dimensions.
            for size in by_area:
                try:
                    resized = resize_cover(master, size.width, size.height)
                except LocalizationError as exc:
                    logger.warning("Resize to %s for %s failed: %s", size.spec.id, locale.id, exc)
                    continue
                produced[size.spec.id] = GeneratedImage(size.spec.id, size.spec.name, resized)
            return produced

        produced[master_size.spec.id] = GeneratedImage(master_size.spec.id, master_size.spec.name, master)
        for size in by_area[1:]:
            try:
                adapted = self._generate(locale, request.cta_text, master, size, is_first_size=False)
            except LocalizationError as exc:
                logger.warning("Adapting to %s for %s failed: %s", size.spec.id, locale.id, exc)
                continue
            produced[size.spec.id] = GeneratedImage(size.spec.id, size.spec.name, adapted)
        return produced

    def _generate(
        self,
        locale: Locale,
        cta_text: str,
        source: ImageData,
        size: _ResolvedSize,
        is_first_size: bool,
    ) -> ImageData:
        prompt = build_prompt(locale, cta_text, size.width, size.height, is_first_size)
        try:
            image = self.generator.generate(source, prompt)
        except LocalizationError:
            raise
        except Exception as exc:
            # Unwrapped backend errors count as transport failures.
            raise GenerationTransportError(str(exc)) from exc

        if image is None:
            raise NoImageProduced(
                f"No image returned for {locale.id} at {size.spec.id}",
                details={"locale": locale.id, "size": size.spec.id},
            )
        return image


def assemble_results(
    results: Iterable[LocaleResult],
    locale_order: Iterable[str],
    size_order: Iterable[str],
) -> List[LocaleResult]:
    """
    Put results back into the user's selection order.

    Images follow `size_order` (not generation or area order), locales follow
    `locale_order`, and locales without any image are dropped.
    """
    size_rank = {size_id: i for i, size_id in enumerate(size_order)}
    locale_rank = {locale_id: i for i, locale_id in enumerate(locale_order)}

    assembled: List[LocaleResult] = []
    for result in results:
        images = sorted(
            (img for img in result.images if img.size_id in size_rank),
            key=lambda img: size_rank[img.size_id],
        )
        if not images:
            continue
        assembled.append(LocaleResult(result.locale_id, result.locale_name, images))

    assembled.sort(key=lambda r: locale_rank.get(r.locale_id, len(locale_rank)))
    return assembled


def _unique(ids: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(ids))
