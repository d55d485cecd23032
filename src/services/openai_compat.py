"""OpenAI chat-completions adapter (text and JSON tiers only)."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from openai import OpenAI

from src.config import HubSettings
from src.errors import CapabilityError, ConfigurationError, wrap_service_error

from .generation import GenerationService, ModelTier, RawGeneration

logger = logging.getLogger(__name__)


def _schema_instruction(schema: Dict[str, Any]) -> str:
    return (
        "\n\nRespond with a single JSON object matching this schema. "
        "No markdown, no prose outside the JSON.\n"
        f"```json\n{json.dumps(schema, indent=2)}\n```"
    )


class OpenAIGenerationService(GenerationService):
    provider = "openai"

    def __init__(self, settings: HubSettings, client: Optional[OpenAI] = None) -> None:
        if client is None:
            if not settings.openai_api_key:
                raise ConfigurationError("OPENAI_API_KEY must be set to call OpenAI models.")
            client = OpenAI(api_key=settings.openai_api_key, timeout=settings.request_timeout)
        self.client = client
        self.settings = settings

    def _invoke(
        self,
        prompt: str,
        *,
        system_instruction: str,
        schema: Optional[Dict[str, Any]],
        tier: ModelTier,
        grounded: bool,
    ) -> RawGeneration:
        if tier is ModelTier.IMAGE:
            raise CapabilityError("OpenAI adapter does not serve the image tier", self.provider)
        if grounded:
            raise CapabilityError("OpenAI adapter does not support web-grounded search", self.provider)

        model = (
            self.settings.openai_reasoning_model
            if tier is ModelTier.REASONING
            else self.settings.openai_text_model
        )
        system = system_instruction + (_schema_instruction(schema) if schema is not None else "")
        request: Dict[str, Any] = {
            "model": model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        }
        if schema is not None:
            request["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(**request)
        except Exception as exc:
            logger.exception("OpenAI chat completion failed (model=%s)", model)
            raise wrap_service_error(exc, self.provider) from exc

        message = response.choices[0].message
        content = message.content
        if isinstance(content, list):
            text = "".join(getattr(part, "text", "") for part in content)
        else:
            text = content or ""
        return RawGeneration(text=text)


__all__ = ["OpenAIGenerationService"]
