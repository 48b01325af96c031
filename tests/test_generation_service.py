import json

import httpx
import pytest
from google.api_core import exceptions as google_exceptions

from config.settings import Settings
from services.generation_service import (
    GeminiTextGenerator,
    GenerationError,
    HuggingFaceTextGenerator,
    build_suggestion_prompt,
    create_text_generator,
)


def hugging_face(handler) -> HuggingFaceTextGenerator:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HuggingFaceTextGenerator(
        api_token="hf-token",
        model="gpt2",
        base_url="https://hf.test/models/",
        client=client,
    )


async def test_returns_first_generated_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{"generated_text": "  Template A  "}, {"generated_text": "B"}])

    generator = hugging_face(handler)
    text = await generator.generate("prompt text")
    await generator.close()

    assert text == "Template A"
    assert seen["url"] == "https://hf.test/models/gpt2"
    assert seen["auth"] == "Bearer hf-token"
    assert seen["body"] == {
        "inputs": "prompt text",
        "parameters": {"max_new_tokens": 500, "temperature": 0.7},
    }


async def test_upstream_error_keeps_status_and_message():
    generator = hugging_face(lambda request: httpx.Response(503, json={"error": "Model is loading"}))

    with pytest.raises(GenerationError) as exc_info:
        await generator.generate("prompt")

    assert exc_info.value.status_code == 503
    assert exc_info.value.message == "Model is loading"


async def test_upstream_error_without_message():
    generator = hugging_face(lambda request: httpx.Response(401, text="unauthorized"))

    with pytest.raises(GenerationError) as exc_info:
        await generator.generate("prompt")

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Failed to fetch template suggestions"


@pytest.mark.parametrize(
    "payload",
    [[], [{"generated_text": "   "}], [{"generated_text": 42}], {"unexpected": True}],
)
async def test_empty_generation(payload):
    generator = hugging_face(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(GenerationError) as exc_info:
        await generator.generate("prompt")

    assert exc_info.value.message == "No suggestions generated"
    assert exc_info.value.status_code == 502


async def test_no_response():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    generator = hugging_face(handler)

    with pytest.raises(GenerationError) as exc_info:
        await generator.generate("prompt")

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "No response from Hugging Face API"


class StubGeminiResponse:
    def __init__(self, text=None):
        self._text = text

    @property
    def text(self):
        if self._text is None:
            raise ValueError("response has no text parts")
        return self._text


class StubGeminiModel:
    """Stands in for genai.GenerativeModel; returns a canned response or raises."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def generate_content_async(self, prompt, generation_config=None):
        self.calls.append((prompt, generation_config))
        if self.error is not None:
            raise self.error
        return self.response


def gemini(model: StubGeminiModel) -> GeminiTextGenerator:
    generator = GeminiTextGenerator(api_key="gemini-key")
    generator._model = model
    return generator


async def test_gemini_returns_stripped_text():
    model = StubGeminiModel(response=StubGeminiResponse("  1. Bold Portfolio  "))

    text = await gemini(model).generate("prompt text")

    assert text == "1. Bold Portfolio"
    assert model.calls[0][0] == "prompt text"


async def test_gemini_api_error_keeps_status_and_message():
    model = StubGeminiModel(error=google_exceptions.ServiceUnavailable("Model overloaded"))

    with pytest.raises(GenerationError) as exc_info:
        await gemini(model).generate("prompt")

    assert exc_info.value.status_code == 503
    assert exc_info.value.message == "Model overloaded"


async def test_gemini_retry_deadline_is_bad_gateway():
    model = StubGeminiModel(error=google_exceptions.RetryError("Deadline of 600s exceeded", cause=None))

    with pytest.raises(GenerationError) as exc_info:
        await gemini(model).generate("prompt")

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Deadline of 600s exceeded"


@pytest.mark.parametrize("response", [StubGeminiResponse(None), StubGeminiResponse("   ")])
async def test_gemini_empty_generation(response):
    with pytest.raises(GenerationError) as exc_info:
        await gemini(StubGeminiModel(response=response)).generate("prompt")

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "No suggestions generated"


async def test_gemini_without_key_is_not_configured():
    generator = GeminiTextGenerator(api_key="")

    with pytest.raises(GenerationError) as exc_info:
        await generator.generate("prompt")

    assert exc_info.value.status_code == 500


def test_prompt_mentions_type_and_industry():
    prompt = build_suggestion_prompt("e-commerce", "fashion")

    assert "e-commerce website in the fashion industry" in prompt
    assert "Recommended Use Cases" in prompt


async def test_create_text_generator_by_provider():
    hf = create_text_generator(Settings(_env_file=None, GENERATION_PROVIDER="huggingface"))
    gemini = create_text_generator(Settings(_env_file=None, GENERATION_PROVIDER="gemini"))

    assert isinstance(hf, HuggingFaceTextGenerator)
    assert isinstance(gemini, GeminiTextGenerator)
    await hf.close()
