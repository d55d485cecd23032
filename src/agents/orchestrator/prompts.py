"""Prompt text used to steer the planner and the specialised agents."""

from __future__ import annotations

import json
from typing import Optional

from src.agents.contracts import AgentKind, ExecutionPlan

# The planner's only disambiguation signal for roadmap requests. "carrier" is
# kept for compatibility with how users actually misspell "career".
ROADMAP_TRIGGER_TERMS = ("roadmap", "carrier", "career", "how to become", "path")

PLANNER_PROMPT: str = f"""
You are the OmniAgent Strategist.
Your goal is to analyze the user's prompt and generate a detailed Execution Plan.

## Agent Selection
Bind every step to exactly one of these agents:
- {AgentKind.SLIDE_MASTER.value} (presentations)
- {AgentKind.WEB_ARCHITECT.value} (websites/code)
- {AgentKind.VISUAL_DESIGNER.value} (images/UI design)
- {AgentKind.RESEARCHER.value} (general web research)
- {AgentKind.YOUTUBE_RESEARCHER.value} (video analysis)
- {AgentKind.ROADMAP_STRATEGIST.value} (career paths, learning roadmaps, long-term plans)

For prompts about {", ".join(f'"{term}"' for term in ROADMAP_TRIGGER_TERMS)}, use {AgentKind.ROADMAP_STRATEGIST.value}.

## Output Rules
- `objective`: one sentence describing the outcome.
- `technicalStack`: tools, formats or technologies involved.
- `estimatedComplexity`: one of Low, Medium, High, Critical.
- `steps`: ordered, at least one step; each step has a unique `id`, a short
  `title`, a `description` and the `agent` token.
- The first step must be bound to the agent that produces the main deliverable.

Provide a structured JSON plan.
""".strip()

SLIDE_MASTER_PROMPT = (
    "You are a Slide Master. Turn the request into a concise, well-paced slide deck. "
    "Every slide needs a short title, a narrative line or quote in `content`, and "
    "a list of key `points` (may be empty)."
)

WEB_ARCHITECT_PROMPT = (
    "You are a Web Architect. Produce a complete, self-contained HTML document for the "
    "request in `html`. Put shared styles in `css` when they are not inlined. "
    "Summarize what you built in `explanation`."
)

VISUAL_DESIGNER_PROMPT = "You are a Visual Designer. Produce a single polished image for the design task."

RESEARCHER_PROMPT = (
    "Senior Deep Researcher. Search the web, cross-check facts and write a structured "
    "markdown report with headings, key findings and open questions."
)

VIDEO_STRATEGIST_PROMPT = (
    "Video market strategist. Analyse the supplied video metadata: recurring themes, "
    "standout channels, publishing cadence, gaps in coverage and content strategy "
    "recommendations. If no videos are supplied, say so and reason from the query alone."
)

ROADMAP_STRATEGIST_PROMPT = (
    "You are the Career Architect. Generate a hierarchical tree roadmap. Use a recursive "
    "structure where each node has: id, label, description, duration, skills, and optional "
    "children. Node ids must be unique across the whole tree. Do not nest deeper than "
    "{max_depth} levels."
)

PLAN_READY_MESSAGE = (
    "I've analyzed your request. Here's a structured plan to build exactly what you need. "
    "Please review the steps below before we initiate the specialized agents."
)
PLAN_REVISED_MESSAGE = "I've updated the plan based on your feedback."
PLAN_FAILED_MESSAGE = (
    "I apologize, but I encountered a critical error during analysis. "
    "Could you please refine your request?"
)


def plan_reference(plan: Optional[ExecutionPlan]) -> str:
    """Embed the approved plan's steps so the agent stays consistent with it."""
    if plan is None:
        return ""
    steps = [step.model_dump(mode="json") for step in plan.steps]
    return f"Follow this approved plan: {json.dumps(steps, ensure_ascii=False)}"


def with_plan(instruction: str, plan: Optional[ExecutionPlan]) -> str:
    reference = plan_reference(plan)
    return f"{instruction} {reference}" if reference else instruction


def planner_request(prompt: str, forced_agent: Optional[AgentKind]) -> str:
    mode = f"Mode already selected: {forced_agent.value}" if forced_agent else "Analyze to find best mode."
    return f"User Prompt: {prompt}. {mode}"


def compose_revision_prompt(original: str, revision: str) -> str:
    return f"Original: {original}. Revision: {revision}"


__all__ = [
    "PLANNER_PROMPT",
    "PLAN_FAILED_MESSAGE",
    "PLAN_READY_MESSAGE",
    "PLAN_REVISED_MESSAGE",
    "RESEARCHER_PROMPT",
    "ROADMAP_STRATEGIST_PROMPT",
    "ROADMAP_TRIGGER_TERMS",
    "SLIDE_MASTER_PROMPT",
    "VIDEO_STRATEGIST_PROMPT",
    "VISUAL_DESIGNER_PROMPT",
    "WEB_ARCHITECT_PROMPT",
    "compose_revision_prompt",
    "plan_reference",
    "planner_request",
    "with_plan",
]
