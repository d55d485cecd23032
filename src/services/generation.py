"""Provider-neutral generation contract.

Providers implement `_invoke` and return a `RawGeneration`; the base class
turns that into a `GenerationResult`. When a `response_model` is given the
JSON reply is validated with pydantic at this boundary; the `schema` dict is
only the JSON-mode hint handed to the provider.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from src.errors import EmptyResultError, MalformedOutputError

logger = logging.getLogger(__name__)


class ModelTier(str, Enum):
    TEXT = "text"
    REASONING = "reasoning"
    IMAGE = "image"


@dataclass
class InlineImage:
    data: bytes
    mime_type: str = "image/png"


@dataclass
class RawGeneration:
    text: str = ""
    citations: List[str] = field(default_factory=list)
    images: List[InlineImage] = field(default_factory=list)


@dataclass
class GenerationResult:
    text: str
    data: Optional[BaseModel] = None
    citations: List[str] = field(default_factory=list)
    images: List[InlineImage] = field(default_factory=list)


def strip_json_fence(text: str) -> str:
    """Strip Markdown fences or a leading `json` tag to leave raw JSON."""

    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
        if cleaned.lower().startswith("json"):
            cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else ""
        cleaned = cleaned.rsplit("```", 1)[0]
    return cleaned.strip()


def parse_structured_output(
    text: str,
    response_model: Type[BaseModel],
    provider: str,
    context: Optional[Dict[str, Any]] = None,
) -> BaseModel:
    payload = strip_json_fence(text)
    try:
        return response_model.model_validate_json(payload, context=context)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        logger.error("%s response failed %s validation: %s", provider, response_model.__name__, exc)
        raise MalformedOutputError(
            f"{provider} response is not a valid {response_model.__name__}: {errors[0]['msg']}",
            provider,
            {"errors": errors[:5], "head": payload[:200]},
        ) from exc


class GenerationService:
    """Base class for generative-model adapters."""

    provider = "base"

    def generate(
        self,
        prompt: str,
        *,
        system_instruction: str,
        schema: Optional[Dict[str, Any]] = None,
        response_model: Optional[Type[BaseModel]] = None,
        validation_context: Optional[Dict[str, Any]] = None,
        tier: ModelTier = ModelTier.TEXT,
        grounded: bool = False,
    ) -> GenerationResult:
        """Run one model call; with `response_model` the reply must validate as JSON."""
        raw = self._invoke(
            prompt,
            system_instruction=system_instruction,
            schema=schema,
            tier=tier,
            grounded=grounded,
        )
        text = (raw.text or "").strip()
        if not text and not raw.images:
            raise EmptyResultError(f"{self.provider} returned no content", self.provider)

        data = None
        if response_model is not None:
            data = parse_structured_output(text, response_model, self.provider, validation_context)
        logger.debug(
            "%s generation finished (tier=%s, %d chars, %d citations, %d images)",
            self.provider,
            tier.value,
            len(text),
            len(raw.citations),
            len(raw.images),
        )
        return GenerationResult(text=text, data=data, citations=list(raw.citations), images=list(raw.images))

    def _invoke(
        self,
        prompt: str,
        *,
        system_instruction: str,
        schema: Optional[Dict[str, Any]],
        tier: ModelTier,
        grounded: bool,
    ) -> RawGeneration:
        raise NotImplementedError


__all__ = [
    "GenerationResult",
    "GenerationService",
    "InlineImage",
    "ModelTier",
    "RawGeneration",
    "parse_structured_output",
    "strip_json_fence",
]
