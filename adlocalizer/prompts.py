from .reference import Locale
from .sizes import banner_height


BANNER_COLOR = "#805ad5"


def build_prompt(
    locale: Locale,
    ad_text: str,
    width: int,
    height: int,
    is_first_size: bool,
) -> str:
    """
    Pick the master prompt for the first size of a locale and the
    adaptation prompt for every size derived from that master.
    """
    if is_first_size:
        return build_master_prompt(locale, ad_text, width, height)
    return build_adaptation_prompt(locale, ad_text, width, height)


def build_master_prompt(locale: Locale, ad_text: str, width: int, height: int) -> str:
    """
    Instructions for turning the uploaded creative into the localized master
    image: exact dimensions, a new background from the locale's country and a
    brand-colored CTA banner carrying the translated text.
    """
    cta = ad_text.strip()
    return (
        "**CRITICAL TASK: Generate a Master Localized Advertisement Image**\n\n"
        "You MUST follow these steps in order.\n\n"
        "**Step 1: Set Final Image Dimensions (MANDATORY)**\n"
        f"- The final output image MUST be exactly {width} pixels wide by {height} pixels high. "
        "This is a non-negotiable directive.\n\n"
        "**Step 2: Transform the Scene**\n"
        f"- Replace the background of the provided image with a new, authentic scene from {locale.country}.\n"
        "- Keep the main subject of the provided image intact.\n\n"
        "**Step 3: Create the CTA Banner**\n"
        f"- Add a solid, opaque rectangular banner with the exact hex color {BANNER_COLOR} "
        "at the absolute bottom of the image, spanning the full width.\n"
        "- The banner's height MUST be exactly 2/5ths of the image height "
        f"({banner_height(height)}px).\n\n"
        "**Step 4: Add the CTA Text**\n"
        f'- Translate the following text to {locale.language}: "{cta}".\n'
        "- Place the translated text (bold, white, centered) inside the banner.\n\n"
        f"**Final Check:** The output must be a single image of size {width}x{height}.\n"
    )


def build_adaptation_prompt(locale: Locale, ad_text: str, width: int, height: int) -> str:
    """
    Instructions for resizing an already localized master to a new size
    without touching its scene.
    """
    cta = ad_text.strip()
    return (
        "**CRITICAL TASK: Adapt a Localized Advertisement Image to a New Size**\n\n"
        "The provided image is an advertisement that has already been localized. "
        "You MUST follow these steps in order.\n\n"
        "**Step 1: Set Final Image Dimensions (MANDATORY)**\n"
        f"- Resize and crop the provided image so the output is exactly {width} pixels wide "
        f"by {height} pixels high.\n\n"
        "**Step 2: Preserve the Scene**\n"
        "- Keep the existing background scene exactly as it is. Do NOT replace, restyle "
        "or add to it.\n\n"
        "**Step 3: Rebuild the CTA Banner**\n"
        f"- The banner keeps the exact hex color {BANNER_COLOR} and sits at the absolute bottom "
        f"of the image, spanning the full new width ({width}px).\n"
        f"- The banner's height MUST be exactly 2/5ths of the new image height ({banner_height(height)}px).\n\n"
        "**Step 4: Re-render the CTA Text**\n"
        f'- Render the same {locale.language} translation of "{cta}" already shown in the image '
        "(bold, white, centered) inside the banner.\n\n"
        f"**Final Check:** The output must be a single image of size {width}x{height}.\n"
    )
