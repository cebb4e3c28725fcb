"""Runtime settings loaded from the environment (and a local .env file)."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError


BACKENDS = ("replicate", "openai", "dry-run")
STRATEGIES = ("resize", "regenerate")

DEFAULT_REPLICATE_MODEL = "google/nano-banana"
DEFAULT_OPENAI_MODEL = "gpt-image-1"


@dataclass
class Settings:
    backend: str = "replicate"
    strategy: str = "resize"
    replicate_api_token: Optional[str] = None
    replicate_model: str = DEFAULT_REPLICATE_MODEL
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL

    @classmethod
    def from_env(cls, backend: Optional[str] = None, strategy: Optional[str] = None) -> "Settings":
        """
        Build settings from environment variables, after loading `.env`.

        Explicit `backend` / `strategy` arguments (e.g. from CLI flags) take
        precedence over ADLOC_IMAGE_BACKEND / ADLOC_STRATEGY.
        """
        load_dotenv()

        settings = cls(
            backend=(backend or os.environ.get("ADLOC_IMAGE_BACKEND") or "replicate").strip().lower(),
            strategy=(strategy or os.environ.get("ADLOC_STRATEGY") or "resize").strip().lower(),
            replicate_api_token=os.environ.get("REPLICATE_API_TOKEN"),
            replicate_model=os.environ.get("ADLOC_REPLICATE_MODEL") or DEFAULT_REPLICATE_MODEL,
            openai_api_key=os.environ.get("OPENAI_API_KEY"),
            openai_model=os.environ.get("ADLOC_OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"Unknown image backend '{self.backend}'. Choose one of: {', '.join(BACKENDS)}"
            )
        if self.strategy not in STRATEGIES:
            raise ConfigurationError(
                f"Unknown strategy '{self.strategy}'. Choose one of: {', '.join(STRATEGIES)}"
            )
        if self.backend == "replicate" and not self.replicate_api_token:
            raise ConfigurationError(
                "REPLICATE_API_TOKEN is not set. A valid API token is required for image generation."
            )
        if self.backend == "openai" and not self.openai_api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY is not set. A valid API key is required for image generation."
            )


def setup_logging(level: int = logging.INFO) -> None:
    """Configure global logging style for CLI use."""
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(message)s",
    )
