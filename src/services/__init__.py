"""External service adapters: generative models and video search."""

from .factory import build_generation_service, build_video_search
from .generation import (
    GenerationResult,
    GenerationService,
    InlineImage,
    ModelTier,
    RawGeneration,
    parse_structured_output,
)
from .youtube import YouTubeSearchService

__all__ = [
    "GenerationResult",
    "GenerationService",
    "InlineImage",
    "ModelTier",
    "RawGeneration",
    "YouTubeSearchService",
    "build_generation_service",
    "build_video_search",
    "parse_structured_output",
]
