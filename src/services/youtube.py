"""YouTube Data API search adapter.

`search_videos` never raises: any failure is logged and degrades to an empty
result so the analysis step can still run.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from googleapiclient.discovery import build

from src.agents.contracts import VideoRecord
from src.config import DEFAULT_VIDEO_MAX_RESULTS, HubSettings

logger = logging.getLogger(__name__)

_THUMBNAIL_ORDER = ("high", "medium", "default")


def _thumbnail_url(snippet: Dict[str, Any]) -> str:
    thumbnails = snippet.get("thumbnails") or {}
    for size in _THUMBNAIL_ORDER:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return ""


def to_video_record(item: Dict[str, Any]) -> Optional[VideoRecord]:
    video_id = (item.get("id") or {}).get("videoId")
    if not video_id:
        return None
    snippet = item.get("snippet") or {}
    return VideoRecord(
        id=video_id,
        title=snippet.get("title") or "",
        thumbnail=_thumbnail_url(snippet),
        channelTitle=snippet.get("channelTitle") or "",
        publishedAt=snippet.get("publishedAt") or "",
        description=snippet.get("description") or "",
    )


class YouTubeSearchService:
    def __init__(self, api_key: Optional[str], *, max_results: int = DEFAULT_VIDEO_MAX_RESULTS) -> None:
        self.api_key = api_key
        self.max_results = max_results
        self._service: Any = None

    @classmethod
    def from_settings(cls, settings: HubSettings) -> "YouTubeSearchService":
        return cls(settings.youtube_api_key, max_results=settings.video_max_results)

    def _client(self) -> Any:
        if self._service is None:
            if not self.api_key:
                raise RuntimeError("YOUTUBE_API_KEY is not set")
            self._service = build("youtube", "v3", developerKey=self.api_key, cache_discovery=False)
        return self._service

    def search_videos(self, query: str) -> List[VideoRecord]:
        try:
            response = (
                self._client()
                .search()
                .list(part="snippet", q=query, type="video", maxResults=self.max_results)
                .execute()
            )
            records = [to_video_record(item) for item in response.get("items") or []]
        except Exception as exc:
            logger.warning("YouTube search failed for %r; continuing with no videos: %s", query, exc)
            return []

        videos = [record for record in records if record is not None][: self.max_results]
        logger.info("YouTube search for %r returned %d videos", query, len(videos))
        return videos


__all__ = ["YouTubeSearchService", "to_video_record"]
