from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest

from src.agents.contracts import VideoRecord
from src.agents.hub import HubSession
from src.agents.orchestrator import AgentDispatcher
from src.services.generation import GenerationService, ModelTier, RawGeneration


class FakeGenerationService(GenerationService):
    """Replays scripted responses; dicts/lists are sent back as JSON text."""

    provider = "fake"

    def __init__(self, *responses: Any) -> None:
        self.responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def _invoke(
        self,
        prompt: str,
        *,
        system_instruction: str,
        schema: Optional[Dict[str, Any]],
        tier: ModelTier,
        grounded: bool,
    ) -> RawGeneration:
        self.calls.append(
            {
                "prompt": prompt,
                "system_instruction": system_instruction,
                "schema": schema,
                "tier": tier,
                "grounded": grounded,
            }
        )
        if not self.responses:
            raise AssertionError(f"unexpected generation call: {prompt[:80]!r}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, (dict, list)):
            return RawGeneration(text=json.dumps(item))
        if isinstance(item, str):
            return RawGeneration(text=item)
        return item


class FakeVideoSearch:
    def __init__(self, videos: Optional[List[VideoRecord]] = None) -> None:
        self.videos = list(videos or [])
        self.queries: List[str] = []

    def search_videos(self, query: str) -> List[VideoRecord]:
        self.queries.append(query)
        return list(self.videos)


def plan_payload(*agents: str, objective: str = "Ship it") -> Dict[str, Any]:
    return {
        "objective": objective,
        "technicalStack": ["Gemini"],
        "estimatedComplexity": "Medium",
        "steps": [
            {"id": f"step-{idx}", "title": f"Step {idx}", "description": "Do the work", "agent": agent}
            for idx, agent in enumerate(agents, start=1)
        ],
    }


SLIDES_PAYLOAD: Dict[str, Any] = {
    "slides": [
        {"title": "Why solar now", "content": "Costs fell 90% in a decade.", "points": ["Cheap panels", "Policy tailwinds"]},
        {"title": "Our edge", "content": "Installer marketplace.", "points": []},
    ],
    "explanation": "Two-slide pitch outline.",
}

WEB_PAYLOAD: Dict[str, Any] = {
    "html": "<main><h1>Solar Co</h1></main>",
    "css": "h1 { color: orange; }",
    "explanation": "Landing page.",
}


def roadmap_chain(depth: int, prefix: str = "n") -> Dict[str, Any]:
    """Raw roadmap dict nested `depth` levels deep, one child per level."""
    node: Dict[str, Any] = {}
    for level in range(depth, 0, -1):
        current = {
            "id": f"{prefix}{level}",
            "label": f"Level {level}",
            "description": "Learn things",
            "duration": "3 months",
            "skills": ["focus"],
        }
        if node:
            current["children"] = [node]
        node = current
    return node


@pytest.fixture
def fake_service() -> FakeGenerationService:
    return FakeGenerationService()


@pytest.fixture
def fake_videos() -> FakeVideoSearch:
    return FakeVideoSearch()


@pytest.fixture
def dispatcher(fake_service, fake_videos) -> AgentDispatcher:
    return AgentDispatcher(fake_service, fake_videos)


@pytest.fixture
def hub(dispatcher) -> HubSession:
    return HubSession(dispatcher)
