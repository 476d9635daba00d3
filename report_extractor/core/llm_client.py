"""Structured-output LLM client.

Wraps an OpenAI-compatible chat-completions endpoint (OpenAI or OpenRouter)
and returns pydantic-validated objects instead of raw text.
"""

import json
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from report_extractor.config import LLMSettings
from report_extractor.core.base_llm_client import BaseLLMClient
from report_extractor.core.exceptions import APIClientError, ConfigurationError, ExtractionError
from report_extractor.utils.json_parser import parse_json_safely
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    OPENROUTER = "openrouter"


DEFAULT_API_URLS = {
    LLMProvider.OPENAI: "https://api.openai.com/v1/chat/completions",
    LLMProvider.OPENROUTER: "https://openrouter.ai/api/v1/chat/completions",
}


class StructuredLLMClient:
    """Client that asks a chat model for JSON matching a pydantic schema."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout: int = 60,
        max_retries: int = 3,
        temperature: float = 0.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Provider API key
            model: Model name to use (e.g., "gpt-4o-mini")
            base_url: Full chat-completions URL
            timeout: Request timeout in seconds
            max_retries: Maximum attempts per call
            temperature: Sampling temperature
            transport: Optional httpx transport (used to stub the network)
        """
        self.model = model
        self.temperature = temperature
        self.client = BaseLLMClient(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            transport=transport,
        )

        LOGGER.info(f"Initialized structured LLM client with model {self.model}")

    async def generate_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: Type[SchemaT],
    ) -> SchemaT:
        """Generate an object validated against ``schema``.

        Args:
            system_prompt: System instruction
            user_prompt: User message, including the document text
            schema: Pydantic model describing the expected JSON

        Returns:
            Validated schema instance

        Raises:
            APIClientError: If the API call fails
            ExtractionError: If the reply is not JSON or fails validation
        """
        schema_hint = (
            "\n\nReturn JSON only that matches this schema (no markdown):\n"
            + json.dumps(schema.model_json_schema(), ensure_ascii=False)
        )
        payload: Dict[str, Any] = {
            "model": self.model,
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt + schema_hint},
            ],
        }

        response = await self.client.call_api(payload=payload)

        try:
            content = response["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            LOGGER.error(f"Unexpected LLM response format: {response}")
            raise APIClientError(f"Unexpected API response format: {e}", original_error=e) from e

        parsed = parse_json_safely(content)
        if parsed is None:
            raise ExtractionError(
                f"{schema.__name__}: model reply is not valid JSON",
            )

        try:
            return schema.model_validate(parsed)
        except PydanticValidationError as e:
            LOGGER.error(
                f"{schema.__name__}: model reply failed schema validation",
                extra={"errors": e.errors(include_url=False)[:10]},
            )
            raise ExtractionError(
                f"{schema.__name__}: model reply failed schema validation: {e}",
                original_error=e,
            ) from e


def create_llm_client(
    settings: LLMSettings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> StructuredLLMClient:
    """Build a StructuredLLMClient from explicit LLM settings.

    Args:
        settings: Provider, model name, credential and transport options
        transport: Optional httpx transport

    Raises:
        ConfigurationError: If the provider is unknown or the API key is missing
    """
    try:
        provider = LLMProvider(settings.provider.lower())
    except ValueError as e:
        raise ConfigurationError(f"Unsupported LLM provider: {settings.provider}", original_error=e) from e

    api_key = settings.api_key.get_secret_value()
    if not api_key:
        raise ConfigurationError("LLM_API_KEY is not set")

    return StructuredLLMClient(
        api_key=api_key,
        model=settings.model_name,
        base_url=settings.api_url or DEFAULT_API_URLS[provider],
        timeout=settings.timeout_seconds,
        max_retries=settings.max_retries,
        temperature=settings.temperature,
        transport=transport,
    )
