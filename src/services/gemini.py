"""Gemini adapter built on the google-generativeai SDK."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import google.generativeai as genai
from google.generativeai import protos

from src.config import HubSettings
from src.errors import ConfigurationError, wrap_service_error

from .generation import GenerationService, InlineImage, ModelTier, RawGeneration

logger = logging.getLogger(__name__)

# Gemini 2.x grounding; the legacy `google_search_retrieval` tool is 1.5-only.
_SEARCH_TOOL = protos.Tool(google_search=protos.Tool.GoogleSearch())


def _first_candidate(response: Any) -> Optional[Any]:
    candidates = getattr(response, "candidates", None) or []
    return candidates[0] if candidates else None


def _parts(candidate: Any) -> List[Any]:
    content = getattr(candidate, "content", None)
    return list(getattr(content, "parts", None) or [])


def extract_text(response: Any) -> str:
    """Concatenate text parts without tripping `response.text` on image-only replies."""
    candidate = _first_candidate(response)
    if candidate is None:
        return ""
    chunks = [getattr(part, "text", "") or "" for part in _parts(candidate)]
    return "".join(chunks)


def extract_images(response: Any) -> List[InlineImage]:
    candidate = _first_candidate(response)
    if candidate is None:
        return []
    images: List[InlineImage] = []
    for part in _parts(candidate):
        inline = getattr(part, "inline_data", None)
        data = getattr(inline, "data", None) if inline is not None else None
        if data:
            images.append(InlineImage(data=data, mime_type=getattr(inline, "mime_type", None) or "image/png"))
    return images


def extract_citations(response: Any) -> List[str]:
    """Return grounding chunk URIs (or titles when no URI) in provider order."""
    candidate = _first_candidate(response)
    metadata = getattr(candidate, "grounding_metadata", None) if candidate is not None else None
    chunks = getattr(metadata, "grounding_chunks", None) or []
    citations: List[str] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is None:
            continue
        reference = getattr(web, "uri", None) or getattr(web, "title", None)
        if reference:
            citations.append(reference)
    return citations


class GeminiGenerationService(GenerationService):
    provider = "gemini"

    def __init__(self, settings: HubSettings) -> None:
        if not settings.google_api_key:
            raise ConfigurationError("GOOGLE_API_KEY must be set to call Gemini.")
        genai.configure(api_key=settings.google_api_key)
        self.settings = settings
        self._models: Dict[ModelTier, str] = {
            ModelTier.TEXT: settings.gemini_text_model,
            ModelTier.REASONING: settings.gemini_reasoning_model,
            ModelTier.IMAGE: settings.gemini_image_model,
        }

    def model_for(self, tier: ModelTier) -> str:
        return self._models[tier]

    def _invoke(
        self,
        prompt: str,
        *,
        system_instruction: str,
        schema: Optional[Dict[str, Any]],
        tier: ModelTier,
        grounded: bool,
    ) -> RawGeneration:
        model_name = self.model_for(tier)
        model = genai.GenerativeModel(model_name, system_instruction=system_instruction or None)

        generation_config: Dict[str, Any] = {}
        if schema is not None:
            generation_config["response_mime_type"] = "application/json"
            generation_config["response_schema"] = schema

        kwargs: Dict[str, Any] = {"request_options": {"timeout": self.settings.request_timeout}}
        if generation_config:
            kwargs["generation_config"] = generation_config
        if grounded:
            kwargs["tools"] = [_SEARCH_TOOL]

        try:
            response = model.generate_content(prompt, **kwargs)
        except Exception as exc:
            logger.exception("Gemini invocation failed (model=%s)", model_name)
            raise wrap_service_error(exc, self.provider) from exc

        return RawGeneration(
            text=extract_text(response),
            citations=extract_citations(response) if grounded else [],
            images=extract_images(response),
        )


__all__ = ["GeminiGenerationService", "extract_citations", "extract_images", "extract_text"]
