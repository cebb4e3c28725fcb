import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from adlocalizer.assets import load_source_image, save_results
from adlocalizer.config import STRATEGIES, Settings, setup_logging
from adlocalizer.core import GenerationRequest, LocalizationPipeline, Strategy
from adlocalizer.errors import LocalizationError
from adlocalizer.generator import build_image_generator
from adlocalizer.reference import AD_SIZES, AVAILABLE_LOCALES, CTA_OPTIONS


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate localized ad variants from one creative image."
    )
    parser.add_argument(
        "--image",
        type=Path,
        help="Path to the source creative (png, jpg, jpeg or webp).",
    )
    parser.add_argument(
        "--locale",
        dest="locales",
        action="append",
        default=[],
        help="Target locale id, e.g. es-ES. Repeat for several locales.",
    )
    parser.add_argument(
        "--size",
        dest="sizes",
        action="append",
        default=[],
        help="Target ad size id, e.g. 1080x1350. Repeat for several sizes.",
    )
    parser.add_argument(
        "--cta",
        default="",
        help=f"Call-to-action text for the banner (e.g. {', '.join(CTA_OPTIONS)}).",
    )
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=None,
        help="'resize' generates one master per locale and crops the rest (default); "
        "'regenerate' asks the model to adapt the master to each size.",
    )
    parser.add_argument(
        "--output-root",
        type=Path,
        default=Path("outputs"),
        help="Root folder where generated ads will be stored.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log prompts instead of calling the image model.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the available locales, ad sizes and CTA phrases, then exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    args = parser.parse_args(argv)
    if args.list:
        return args

    # Same checks, in the same order, as the upload form.
    if args.image is None:
        parser.error("Please provide an image with --image.")
    if not args.cta.strip():
        parser.error("Please provide the CTA text with --cta.")
    if not args.locales:
        parser.error("Please select at least one locale with --locale.")
    if not args.sizes:
        parser.error("Please select at least one ad size with --size.")
    return args


def print_reference() -> None:
    print("Locales:")
    for locale in AVAILABLE_LOCALES:
        print(f"  {locale.id:<8} {locale.name}")
    print("Ad sizes:")
    for size in AD_SIZES:
        print(f"  {size.id:<10} {size.name}")
    print("CTA phrases:")
    for option in CTA_OPTIONS:
        print(f"  {option}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.list:
        print_reference()
        return 0

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = Settings.from_env(
            backend="dry-run" if args.dry_run else None,
            strategy=args.strategy,
        )
        image = load_source_image(args.image)
        pipeline = LocalizationPipeline(
            generator=build_image_generator(settings),
            strategy=Strategy(settings.strategy),
        )
        request = GenerationRequest.create(
            image=image,
            locale_ids=args.locales,
            size_ids=args.sizes,
            cta_text=args.cta,
        )
        results = pipeline.run(request)
    except LocalizationError as exc:
        logger.error("%s", exc)
        logger.debug("Error details: %s", exc.to_dict())
        return 1

    if not results:
        print("No results: no locale produced an image.")
        return 0

    written = save_results(results, args.output_root)
    for result in results:
        sizes = ", ".join(img.size_id for img in result.images)
        print(f"{result.locale_name}: {sizes}")
    print(f"Saved {len(written)} image(s) under {args.output_root}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
