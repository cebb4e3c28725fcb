from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple


@dataclass(frozen=True)
class Locale:
    id: str
    name: str
    country: str
    language: str


@dataclass(frozen=True)
class AdSizeSpec:
    id: str
    name: str


AVAILABLE_LOCALES: Tuple[Locale, ...] = (
    Locale(id="es-ES", name="Spanish (Spain)", country="Spain", language="Spanish"),
    Locale(id="fr-FR", name="French (France)", country="France", language="French"),
    Locale(id="ja-JP", name="Japanese (Japan)", country="Japan", language="Japanese"),
)

AD_SIZES: Tuple[AdSizeSpec, ...] = (
    AdSizeSpec(id="1200x1200", name="Google Ads (1200x1200)"),
    AdSizeSpec(id="1024x1024", name="Default Square (1024x1024)"),
    AdSizeSpec(id="1080x1350", name="Instagram Portrait (1080x1350)"),
)

# Suggested call-to-action phrases; any non-empty text is accepted.
CTA_OPTIONS: Tuple[str, ...] = (
    "Buy Now",
    "Download Now",
    "Learn More",
)

LOCALES_BY_ID: Mapping[str, Locale] = MappingProxyType({loc.id: loc for loc in AVAILABLE_LOCALES})
AD_SIZES_BY_ID: Mapping[str, AdSizeSpec] = MappingProxyType({s.id: s for s in AD_SIZES})
