"""Generation gateway: one place that talks to the text-generation backend."""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors, types

from .config import GeminiConfig
from .errors import BackendError, EmptyResponse, MalformedStructure
from .utils.text import parse_json_response


class GenerationGateway(ABC):
    """Ask a backend for freeform text or schema-constrained JSON.

    ``generate`` returns a ``str`` when ``schema`` is None and the decoded
    JSON value otherwise. Subclasses only implement ``_complete``.
    """

    async def generate(
        self,
        prompt: str,
        *,
        model: str,
        schema: Any = None,
        system: Optional[str] = None,
    ) -> Any:
        text = await self._complete(prompt, model=model, schema=schema, system=system)
        if not text or not text.strip():
            raise EmptyResponse(f"Backend returned no text (model={model})")
        if schema is None:
            return text
        try:
            return parse_json_response(text)
        except ValueError as e:
            raise MalformedStructure(str(e)) from e

    @abstractmethod
    async def _complete(
        self,
        prompt: str,
        *,
        model: str,
        schema: Any,
        system: Optional[str],
    ) -> Optional[str]:
        ...


class GeminiGateway(GenerationGateway):
    """Gateway backed by the google-genai async client."""

    def __init__(self, config: GeminiConfig, client: Optional[genai.Client] = None):
        self.config = config
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            api_key = self.config.resolve_api_key()
            if not api_key:
                raise BackendError("No Gemini API key configured; set GEMINI_API_KEY")
            self._client = genai.Client(api_key=api_key)
        return self._client

    def _build_config(self, schema: Any, system: Optional[str]) -> types.GenerateContentConfig:
        kwargs: dict[str, Any] = {
            "temperature": self.config.temperature,
            "max_output_tokens": self.config.max_output_tokens,
        }
        if system:
            kwargs["system_instruction"] = system
        if schema is not None:
            kwargs["response_mime_type"] = "application/json"
            kwargs["response_schema"] = schema
        return types.GenerateContentConfig(**kwargs)

    async def _complete(
        self,
        prompt: str,
        *,
        model: str,
        schema: Any,
        system: Optional[str],
    ) -> Optional[str]:
        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=self._build_config(schema, system),
            )
        except errors.APIError as e:
            raise BackendError(f"Gemini request failed: {e.message or e}", code=e.code) from e
        except httpx.HTTPError as e:
            raise BackendError(f"Gemini transport failure: {e}") from e
        return response.text
