from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel

from src.agents.contracts import AgentKind, Message, ResponseEnvelope


class AppContext(str, Enum):
    HUB = "HUB"
    LOADING = "LOADING"
    CHAT_PLANNING = "CHAT"
    SLIDES = "SLIDES"
    WEB = "WEB"
    DESIGN = "DESIGN"
    RESEARCH = "RESEARCH"
    YOUTUBE = "YOUTUBE"
    ROADMAP = "ROADMAP"


WORKSPACE_BY_AGENT: Dict[AgentKind, AppContext] = {
    AgentKind.SLIDE_MASTER: AppContext.SLIDES,
    AgentKind.WEB_ARCHITECT: AppContext.WEB,
    AgentKind.VISUAL_DESIGNER: AppContext.DESIGN,
    AgentKind.RESEARCHER: AppContext.RESEARCH,
    AgentKind.YOUTUBE_RESEARCHER: AppContext.YOUTUBE,
    AgentKind.ROADMAP_STRATEGIST: AppContext.ROADMAP,
}

WORKSPACE_CONTEXTS = frozenset(WORKSPACE_BY_AGENT.values())


def workspace_for(agent: AgentKind) -> AppContext:
    """Workspace that renders `agent`'s envelopes; the hub when there is none."""
    return WORKSPACE_BY_AGENT.get(agent, AppContext.HUB)


class HubSnapshot(BaseModel):
    """Read-only view of a hub session handed to the rendering layer."""

    context: AppContext
    active_mode: Optional[AgentKind] = None
    busy: bool = False
    activity: Optional[str] = None
    transcript: List[Message]
    envelope: Optional[ResponseEnvelope] = None
    last_prompt: str = ""
    notice: Optional[str] = None


__all__ = ["AppContext", "HubSnapshot", "WORKSPACE_BY_AGENT", "WORKSPACE_CONTEXTS", "workspace_for"]
