import pytest

from adlocalizer import config
from adlocalizer.config import Settings
from adlocalizer.errors import ConfigurationError


ENV_VARS = [
    "ADLOC_IMAGE_BACKEND",
    "ADLOC_STRATEGY",
    "REPLICATE_API_TOKEN",
    "ADLOC_REPLICATE_MODEL",
    "OPENAI_API_KEY",
    "ADLOC_OPENAI_MODEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a developer's local .env out of the tests
    monkeypatch.setattr(config, "load_dotenv", lambda *args, **kwargs: False)


def test_defaults_need_replicate_token():
    with pytest.raises(ConfigurationError) as excinfo:
        Settings.from_env()
    assert "REPLICATE_API_TOKEN" in str(excinfo.value)
    assert excinfo.value.code == "CONFIGURATION_ERROR"


def test_replicate_from_env(monkeypatch):
    monkeypatch.setenv("REPLICATE_API_TOKEN", "r8_abc")
    monkeypatch.setenv("ADLOC_REPLICATE_MODEL", "google/nano-banana-pro")

    settings = Settings.from_env()

    assert settings.backend == "replicate"
    assert settings.strategy == "resize"
    assert settings.replicate_api_token == "r8_abc"
    assert settings.replicate_model == "google/nano-banana-pro"


def test_openai_backend_needs_key(monkeypatch):
    monkeypatch.setenv("ADLOC_IMAGE_BACKEND", "openai")
    with pytest.raises(ConfigurationError):
        Settings.from_env()

    monkeypatch.setenv("OPENAI_API_KEY", "sk-abc")
    settings = Settings.from_env()
    assert settings.backend == "openai"
    assert settings.openai_model == "gpt-image-1"


def test_explicit_arguments_override_env(monkeypatch):
    monkeypatch.setenv("ADLOC_IMAGE_BACKEND", "openai")
    monkeypatch.setenv("ADLOC_STRATEGY", "resize")

    settings = Settings.from_env(backend="dry-run", strategy="regenerate")

    assert settings.backend == "dry-run"
    assert settings.strategy == "regenerate"


def test_values_are_normalised(monkeypatch):
    monkeypatch.setenv("ADLOC_IMAGE_BACKEND", " Dry-Run ")
    monkeypatch.setenv("ADLOC_STRATEGY", "REGENERATE")
    settings = Settings.from_env()
    assert (settings.backend, settings.strategy) == ("dry-run", "regenerate")


@pytest.mark.parametrize(
    "backend,strategy",
    [("midjourney", "resize"), ("dry-run", "sometimes")],
)
def test_unknown_values_are_rejected(backend, strategy):
    with pytest.raises(ConfigurationError):
        Settings(backend=backend, strategy=strategy).validate()
