"""Environment-driven settings for the hub and its service adapters."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

_DEFAULT_PROVIDER = "gemini"
_DEFAULT_GEMINI_TEXT_MODEL = "gemini-2.5-flash"
_DEFAULT_GEMINI_REASONING_MODEL = "gemini-2.5-pro"
_DEFAULT_GEMINI_IMAGE_MODEL = "gemini-2.5-flash-image"
_DEFAULT_OPENAI_TEXT_MODEL = "gpt-4.1-mini"
_DEFAULT_OPENAI_REASONING_MODEL = "gpt-4.1"

DEFAULT_VIDEO_MAX_RESULTS = 12
DEFAULT_ROADMAP_MAX_DEPTH = 4
DEFAULT_HUB_MAX_SESSIONS = 256
DEFAULT_HUB_IDLE_SECONDS = 3600


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _get_int(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class HubSettings:
    provider: str = _DEFAULT_PROVIDER
    google_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    youtube_api_key: Optional[str] = None
    gemini_text_model: str = _DEFAULT_GEMINI_TEXT_MODEL
    gemini_reasoning_model: str = _DEFAULT_GEMINI_REASONING_MODEL
    gemini_image_model: str = _DEFAULT_GEMINI_IMAGE_MODEL
    openai_text_model: str = _DEFAULT_OPENAI_TEXT_MODEL
    openai_reasoning_model: str = _DEFAULT_OPENAI_REASONING_MODEL
    request_timeout: int = 120
    video_max_results: int = DEFAULT_VIDEO_MAX_RESULTS
    roadmap_max_depth: int = DEFAULT_ROADMAP_MAX_DEPTH
    hub_max_sessions: int = DEFAULT_HUB_MAX_SESSIONS
    hub_idle_seconds: int = DEFAULT_HUB_IDLE_SECONDS

    @classmethod
    def from_env(cls) -> "HubSettings":
        """Read settings from the process environment (and `.env`, if present)."""

        load_dotenv()
        return cls(
            provider=(_get_env("OMNIAGENT_PROVIDER", _DEFAULT_PROVIDER) or _DEFAULT_PROVIDER).lower(),
            google_api_key=_get_env("GOOGLE_API_KEY"),
            openai_api_key=_get_env("OPENAI_API_KEY"),
            youtube_api_key=_get_env("YOUTUBE_API_KEY"),
            gemini_text_model=_get_env("OMNIAGENT_GEMINI_TEXT_MODEL", _DEFAULT_GEMINI_TEXT_MODEL),
            gemini_reasoning_model=_get_env(
                "OMNIAGENT_GEMINI_REASONING_MODEL", _DEFAULT_GEMINI_REASONING_MODEL
            ),
            gemini_image_model=_get_env("OMNIAGENT_GEMINI_IMAGE_MODEL", _DEFAULT_GEMINI_IMAGE_MODEL),
            openai_text_model=_get_env("OMNIAGENT_OPENAI_TEXT_MODEL", _DEFAULT_OPENAI_TEXT_MODEL),
            openai_reasoning_model=_get_env(
                "OMNIAGENT_OPENAI_REASONING_MODEL", _DEFAULT_OPENAI_REASONING_MODEL
            ),
            request_timeout=_get_int("OMNIAGENT_REQUEST_TIMEOUT", 120),
            video_max_results=_get_int("OMNIAGENT_VIDEO_MAX_RESULTS", DEFAULT_VIDEO_MAX_RESULTS),
            roadmap_max_depth=_get_int("OMNIAGENT_ROADMAP_MAX_DEPTH", DEFAULT_ROADMAP_MAX_DEPTH),
            hub_max_sessions=_get_int("OMNIAGENT_HUB_MAX_SESSIONS", DEFAULT_HUB_MAX_SESSIONS),
            hub_idle_seconds=_get_int("OMNIAGENT_HUB_IDLE_SECONDS", DEFAULT_HUB_IDLE_SECONDS),
        )


@lru_cache(maxsize=1)
def get_settings() -> HubSettings:
    return HubSettings.from_env()


__all__ = [
    "DEFAULT_HUB_IDLE_SECONDS",
    "DEFAULT_HUB_MAX_SESSIONS",
    "DEFAULT_ROADMAP_MAX_DEPTH",
    "DEFAULT_VIDEO_MAX_RESULTS",
    "HubSettings",
    "get_settings",
]
