"""Build the service adapters selected by `HubSettings`."""

from __future__ import annotations

import logging
from typing import Optional

from src.config import HubSettings, get_settings
from src.errors import ConfigurationError

from .generation import GenerationService
from .youtube import YouTubeSearchService

logger = logging.getLogger(__name__)


def build_generation_service(settings: Optional[HubSettings] = None) -> GenerationService:
    settings = settings or get_settings()
    if settings.provider == "openai":
        from .openai_compat import OpenAIGenerationService

        return OpenAIGenerationService(settings)
    if settings.provider == "gemini":
        from .gemini import GeminiGenerationService

        return GeminiGenerationService(settings)
    raise ConfigurationError(f"Unknown OMNIAGENT_PROVIDER {settings.provider!r}")


def build_video_search(settings: Optional[HubSettings] = None) -> YouTubeSearchService:
    settings = settings or get_settings()
    if not settings.youtube_api_key:
        logger.warning("YOUTUBE_API_KEY not set; video research will analyse an empty result set")
    return YouTubeSearchService.from_settings(settings)


__all__ = ["build_generation_service", "build_video_search"]
