"""Execution-plan generation."""

from __future__ import annotations

import logging
from typing import Optional

from src.agents.contracts import EXECUTION_PLAN_SCHEMA, AgentKind, ExecutionPlan
from src.errors import PlanGenerationError, ServiceError
from src.services.generation import GenerationService, ModelTier

from .prompts import PLANNER_PROMPT, planner_request

logger = logging.getLogger(__name__)


def generate_plan(
    prompt: str,
    forced_agent: Optional[AgentKind] = None,
    *,
    service: GenerationService,
) -> ExecutionPlan:
    """Ask the reasoning tier for a structured plan for `prompt`.

    Revisions go through the same call with a composite prompt built by
    `compose_revision_prompt`; the result is a fresh plan, never a merge.
    """

    if not prompt or not prompt.strip():
        raise ValueError("prompt must not be empty")

    try:
        result = service.generate(
            planner_request(prompt.strip(), forced_agent),
            system_instruction=PLANNER_PROMPT,
            schema=EXECUTION_PLAN_SCHEMA,
            response_model=ExecutionPlan,
            tier=ModelTier.REASONING,
        )
    except ServiceError as exc:
        logger.error("Plan generation failed: %s", exc)
        raise PlanGenerationError(f"Plan generation failed: {exc}", {"provider": exc.provider}) from exc

    plan = result.data
    if not plan.is_approvable:
        logger.error("LLM returned a plan with no steps")
        raise PlanGenerationError("Generated plan has no steps")

    logger.info(
        "Generated execution plan with %d steps (first agent %s)",
        len(plan.steps),
        plan.steps[0].agent.value,
    )
    return plan


__all__ = ["generate_plan"]
