"""Plan generation and agent dispatch."""

from .catalog import AGENT_CATALOG, DIRECT_DISPATCH_AGENTS, list_agents
from .dispatcher import AgentDispatcher, resolve_primary_agent
from .planner import generate_plan
from .prompts import ROADMAP_TRIGGER_TERMS, compose_revision_prompt

__all__ = [
    "AGENT_CATALOG",
    "AgentDispatcher",
    "DIRECT_DISPATCH_AGENTS",
    "ROADMAP_TRIGGER_TERMS",
    "compose_revision_prompt",
    "generate_plan",
    "list_agents",
    "resolve_primary_agent",
]
