import base64
from types import SimpleNamespace

import openai
import pytest
import replicate

from adlocalizer.config import Settings
from adlocalizer.errors import GenerationTransportError
from adlocalizer.generator import (
    DryRunImageGenerator,
    OpenAIImageGenerator,
    ReplicateImageGenerator,
    _first_image,
    build_image_generator,
)


class FakeFileOutput:
    def __init__(self, data):
        self.data = data

    def read(self):
        return self.data


def _replicate_client(output=None, error=None, seen=None):
    class FakeClient:
        def __init__(self, api_token=None):
            self.api_token = api_token

        def run(self, model, input):
            if seen is not None:
                seen.append((self.api_token, model, input))
            if error is not None:
                raise error
            return output

    return FakeClient


def test_first_image_from_file_output(make_image):
    png = make_image(10, 10)
    result = _first_image(FakeFileOutput(png.data))
    assert result.data == png.data
    assert result.mime_type == "image/png"


def test_first_image_takes_first_item_of_list(make_image):
    first = make_image(10, 10, fmt="JPEG")
    second = make_image(20, 20)
    result = _first_image([FakeFileOutput(first.data), FakeFileOutput(second.data)])
    assert result.data == first.data
    assert result.mime_type == "image/jpeg"


def test_first_image_from_data_uri(make_image):
    png = make_image(10, 10)
    assert _first_image(png.data_uri) == png


def test_first_image_without_image_returns_none():
    assert _first_image(None) is None
    assert _first_image([]) is None
    assert _first_image("https://example.com/output.png") is None
    assert _first_image(FakeFileOutput(b"plain text, no pixels")) is None


def test_first_image_with_broken_data_uri_is_transport_error():
    with pytest.raises(GenerationTransportError):
        _first_image("data:image/png;base64,@@@not-base64@@@")


def test_replicate_generator_sends_image_and_prompt(monkeypatch, make_image):
    source = make_image(32, 32)
    produced = make_image(64, 80)
    seen = []
    monkeypatch.setattr(replicate, "Client", _replicate_client(output=FakeFileOutput(produced.data), seen=seen))

    generator = ReplicateImageGenerator(api_token="r8_test", model="google/nano-banana")
    result = generator.generate(source, "make it Spanish")

    assert result.data == produced.data
    token, model, params = seen[0]
    assert token == "r8_test"
    assert model == "google/nano-banana"
    assert params["prompt"] == "make it Spanish"
    assert params["image_input"][0].read() == source.data
    assert params["output_format"] == "png"


def test_replicate_generator_returns_none_without_image(monkeypatch, make_image):
    monkeypatch.setattr(replicate, "Client", _replicate_client(output=[]))
    assert ReplicateImageGenerator(api_token="r8_test").generate(make_image(), "prompt") is None


def test_replicate_generator_wraps_transport_errors(monkeypatch, make_image):
    monkeypatch.setattr(replicate, "Client", _replicate_client(error=ConnectionError("network down")))
    with pytest.raises(GenerationTransportError) as excinfo:
        ReplicateImageGenerator(api_token="r8_test").generate(make_image(), "prompt")
    assert excinfo.value.details == {"model": "google/nano-banana"}


def _openai_client(data=None, error=None, seen=None):
    class FakeImages:
        def edit(self, **kwargs):
            if seen is not None:
                seen.append(kwargs)
            if error is not None:
                raise error
            return SimpleNamespace(data=data)

    class FakeOpenAI:
        def __init__(self, api_key=None):
            self.images = FakeImages()

    return FakeOpenAI


def test_openai_generator_decodes_base64(monkeypatch, make_image):
    source = make_image(16, 16)
    produced = make_image(40, 50)
    seen = []
    payload = [SimpleNamespace(b64_json=base64.b64encode(produced.data).decode("ascii"))]
    monkeypatch.setattr(openai, "OpenAI", _openai_client(data=payload, seen=seen))

    result = OpenAIImageGenerator(api_key="sk-test").generate(source, "prompt")

    assert result.data == produced.data
    assert seen[0]["model"] == "gpt-image-1"
    assert seen[0]["image"] == ("source.png", source.data, "image/png")


def test_openai_generator_without_image_returns_none(monkeypatch, make_image):
    monkeypatch.setattr(openai, "OpenAI", _openai_client(data=[SimpleNamespace(b64_json=None)]))
    assert OpenAIImageGenerator(api_key="sk-test").generate(make_image(), "prompt") is None


def test_openai_generator_wraps_transport_errors(monkeypatch, make_image):
    monkeypatch.setattr(openai, "OpenAI", _openai_client(error=TimeoutError("slow")))
    with pytest.raises(GenerationTransportError):
        OpenAIImageGenerator(api_key="sk-test").generate(make_image(), "prompt")


def test_dry_run_echoes_input(make_image):
    source = make_image()
    assert DryRunImageGenerator().generate(source, "prompt") is source


def test_build_image_generator():
    assert isinstance(
        build_image_generator(Settings(backend="replicate", replicate_api_token="r8_x")),
        ReplicateImageGenerator,
    )
    openai_generator = build_image_generator(Settings(backend="openai", openai_api_key="sk-x", openai_model="m"))
    assert isinstance(openai_generator, OpenAIImageGenerator)
    assert openai_generator.model == "m"
    assert isinstance(build_image_generator(Settings(backend="dry-run")), DryRunImageGenerator)
