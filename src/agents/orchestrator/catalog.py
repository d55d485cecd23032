"""Agent catalog shown on the hub (labels for the mode selector)."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List

from src.agents.contracts import AgentKind

# Forced modes that skip planning and dispatch straight from the hub.
DIRECT_DISPATCH_AGENTS = frozenset({AgentKind.RESEARCHER, AgentKind.YOUTUBE_RESEARCHER})


@dataclass(frozen=True)
class AgentProfile:
    agent: AgentKind
    label: str
    description: str
    featured: bool = False
    supported: bool = True

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["agent"] = self.agent.value
        data["direct_dispatch"] = self.agent in DIRECT_DISPATCH_AGENTS
        return data


AGENT_CATALOG: Dict[AgentKind, AgentProfile] = {
    profile.agent: profile
    for profile in (
        AgentProfile(AgentKind.SLIDE_MASTER, "Create slides", "Presentation decks with titles and key points.", featured=True),
        AgentProfile(AgentKind.WEB_ARCHITECT, "Build website", "Self-contained HTML pages and styles.", featured=True),
        AgentProfile(AgentKind.YOUTUBE_RESEARCHER, "Video Research", "Video search plus market and strategy analysis.", featured=True),
        AgentProfile(AgentKind.ROADMAP_STRATEGIST, "Career Roadmap", "Hierarchical learning and career roadmaps.", featured=True),
        AgentProfile(AgentKind.RESEARCHER, "Deep Research", "Web-grounded research reports with sources."),
        AgentProfile(AgentKind.VISUAL_DESIGNER, "Professional Design", "Generated images and visual concepts."),
        AgentProfile(AgentKind.TASK_SCHEDULER, "Schedule Task", "Task scheduling.", supported=False),
        AgentProfile(AgentKind.ORCHESTRATOR, "Orchestrator", "General coordination.", supported=False),
    )
}


def list_agents() -> List[Dict[str, object]]:
    return [profile.to_dict() for profile in AGENT_CATALOG.values()]


__all__ = ["AGENT_CATALOG", "AgentProfile", "DIRECT_DISPATCH_AGENTS", "list_agents"]
