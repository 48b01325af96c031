"""
Text Generation Service

Forwards prompts to an external text-generation API and returns the first
generated text. Two backends are available:
- Hugging Face Inference API over httpx
- Google Gemini through google-generativeai
A single attempt is made per request; failures are mapped to GenerationError
carrying the HTTP status to relay.
"""

import logging
from typing import Optional, Protocol

import httpx
import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import GenerationConfig

from config.logging_utils import log_debug, log_error

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when the external generation call fails."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TextGenerator(Protocol):
    """Anything that turns a prompt into generated text."""

    async def generate(self, prompt: str) -> str: ...

    async def close(self) -> None: ...


def build_suggestion_prompt(website_type: str, industry: str) -> str:
    """Build the template suggestion prompt for a website type and industry."""
    return f"""Provide a list of 5 website template suggestions for a user who wants to create a {website_type} website in the {industry} industry. For each template, include the following details:

1. Template Name
2. Description
3. Key Features
4. Recommended Use Cases

Format the response in a clear and organized manner."""


class HuggingFaceTextGenerator:
    """Text generation through the Hugging Face Inference API."""

    def __init__(
        self,
        api_token: str,
        model: str = "gpt2",
        base_url: str = "https://api-inference.huggingface.co/models",
        max_new_tokens: int = 500,
        temperature: float = 0.7,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.api_token = api_token
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_new_tokens = max_new_tokens
        self.temperature = temperature
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def generate(self, prompt: str) -> str:
        url = f"{self.base_url}/{self.model}"
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": self.max_new_tokens,
                "temperature": self.temperature,
            },
        }
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

        log_debug(f"POST {url}", prefix="SUGGEST")
        try:
            response = await self._client.post(url, json=payload, headers=headers)
        except httpx.RequestError as e:
            log_error(f"No response from Hugging Face API: {e}", prefix="SUGGEST")
            logger.warning("Hugging Face request failed: %s", e)
            raise GenerationError("No response from Hugging Face API", status_code=502)

        if response.status_code >= 400:
            message = _error_message(response) or "Failed to fetch template suggestions"
            logger.warning(
                "Hugging Face API returned %s: %s", response.status_code, response.text[:500]
            )
            raise GenerationError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            raise GenerationError("Invalid response from Hugging Face API", status_code=502)

        text = ""
        if isinstance(data, list) and data and isinstance(data[0], dict):
            generated = data[0].get("generated_text")
            if isinstance(generated, str):
                text = generated.strip()
        if not text:
            raise GenerationError("No suggestions generated", status_code=502)
        return text

    async def close(self) -> None:
        await self._client.aclose()


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, str):
            return error
    return None


class GeminiTextGenerator:
    """Text generation through Google Gemini."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.0-flash",
        max_new_tokens: int = 500,
        temperature: float = 0.7
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.max_new_tokens = max_new_tokens
        self.temperature = temperature
        self._model: Optional[genai.GenerativeModel] = None

    def _get_model(self) -> genai.GenerativeModel:
        """Configure the API key on first use and return the model."""
        if not self.api_key:
            raise GenerationError("Text generation is not configured", status_code=500)

        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)

        return self._model

    async def generate(self, prompt: str) -> str:
        model = self._get_model()

        try:
            response = await model.generate_content_async(
                prompt,
                generation_config=GenerationConfig(
                    temperature=self.temperature,
                    max_output_tokens=self.max_new_tokens,
                )
            )
            text = response.text
        except google_exceptions.GoogleAPIError as e:
            # RetryError and other non-call errors carry no HTTP code.
            logger.warning("Gemini API call failed: %s", e)
            message = getattr(e, "message", None) or "Failed to fetch template suggestions"
            raise GenerationError(str(message), status_code=getattr(e, "code", None) or 502)
        except ValueError:
            # Raised by response.text when the candidate has no text parts.
            raise GenerationError("No suggestions generated", status_code=502)

        if not text or not text.strip():
            raise GenerationError("No suggestions generated", status_code=502)
        return text.strip()

    async def close(self) -> None:
        self._model = None


def create_text_generator(settings) -> TextGenerator:
    """Build the generator selected by GENERATION_PROVIDER."""
    if settings.GENERATION_PROVIDER == "gemini":
        return GeminiTextGenerator(
            api_key=settings.GEMINI_API_KEY,
            model_name=settings.GEMINI_MODEL_NAME,
            max_new_tokens=settings.GENERATION_MAX_NEW_TOKENS,
            temperature=settings.GENERATION_TEMPERATURE
        )
    return HuggingFaceTextGenerator(
        api_token=settings.HUGGING_FACE_API_TOKEN,
        model=settings.HUGGING_FACE_MODEL,
        base_url=settings.HUGGING_FACE_API_URL,
        max_new_tokens=settings.GENERATION_MAX_NEW_TOKENS,
        temperature=settings.GENERATION_TEMPERATURE,
        timeout=settings.GENERATION_TIMEOUT_SECONDS
    )
