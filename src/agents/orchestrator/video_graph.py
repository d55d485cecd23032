from __future__ import annotations

import json
import logging
from typing import List, Protocol, TypedDict

from langgraph.graph import END, StateGraph

from src.agents.contracts import VideoRecord
from src.services.generation import GenerationService, ModelTier

logger = logging.getLogger(__name__)


class VideoSearch(Protocol):
    def search_videos(self, query: str) -> List[VideoRecord]: ...


class VideoResearchState(TypedDict, total=False):
    query: str
    instruction: str
    videos: List[VideoRecord]
    analysis: str


def build_video_research_graph(service: GenerationService, video_search: VideoSearch):
    """Two sequential steps: search, then analyse whatever came back (possibly nothing)."""

    def search_node(state: VideoResearchState) -> dict:
        videos = video_search.search_videos(state["query"])
        if not videos:
            logger.warning("No videos found for %r; analysing an empty result set", state["query"])
        return {"videos": videos}

    def analyze_node(state: VideoResearchState) -> dict:
        videos = state.get("videos") or []
        payload = json.dumps([video.model_dump(mode="json") for video in videos], ensure_ascii=False)
        result = service.generate(
            f"User Query: {state['query']}. Analyze results: {payload}.",
            system_instruction=state["instruction"],
            tier=ModelTier.TEXT,
        )
        return {"analysis": result.text}

    g = StateGraph(VideoResearchState)
    g.add_node("search", search_node)
    g.add_node("analyze", analyze_node)
    g.set_entry_point("search")
    g.add_edge("search", "analyze")
    g.add_edge("analyze", END)
    return g.compile()


__all__ = ["VideoResearchState", "VideoSearch", "build_video_research_graph"]
