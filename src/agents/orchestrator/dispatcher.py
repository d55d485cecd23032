"""Agent dispatch: one request in, one typed response envelope out."""

from __future__ import annotations

import base64
import logging
from typing import Callable, Dict, Optional

from pydantic import ValidationError

from src.agents.contracts import (
    SLIDE_DECK_SCHEMA,
    WEB_BUILD_SCHEMA,
    AgentKind,
    ExecutionPlan,
    ResearchReport,
    ResearchReportEnvelope,
    ResponseEnvelope,
    Roadmap,
    RoadmapEnvelope,
    SlideDeck,
    SlideDeckEnvelope,
    SlideDeckReply,
    VideoAnalysis,
    VideoAnalysisEnvelope,
    VisualDesign,
    VisualDesignEnvelope,
    WebBuild,
    WebBuildEnvelope,
    WebBuildReply,
    roadmap_schema,
)
from src.config import DEFAULT_ROADMAP_MAX_DEPTH
from src.errors import (
    AgentExecutionError,
    ImageExtractionError,
    MalformedOutputError,
    ServiceError,
    UnsupportedAgentError,
)
from src.services.generation import GenerationService, ModelTier

from .prompts import (
    RESEARCHER_PROMPT,
    ROADMAP_STRATEGIST_PROMPT,
    SLIDE_MASTER_PROMPT,
    VIDEO_STRATEGIST_PROMPT,
    VISUAL_DESIGNER_PROMPT,
    WEB_ARCHITECT_PROMPT,
    plan_reference,
    with_plan,
)
from .video_graph import VideoSearch, build_video_research_graph

logger = logging.getLogger(__name__)

Handler = Callable[[str, Optional[ExecutionPlan]], ResponseEnvelope]


def resolve_primary_agent(plan: ExecutionPlan, forced_agent: Optional[AgentKind]) -> AgentKind:
    """Pick the executor at approval time: forced mode, else first step, else Orchestrator."""
    if forced_agent is not None:
        return forced_agent
    if plan.steps:
        return plan.steps[0].agent
    return AgentKind.ORCHESTRATOR


class AgentDispatcher:
    def __init__(
        self,
        service: GenerationService,
        video_search: VideoSearch,
        *,
        roadmap_max_depth: int = DEFAULT_ROADMAP_MAX_DEPTH,
    ) -> None:
        self.service = service
        self.video_search = video_search
        self.roadmap_max_depth = roadmap_max_depth
        self._video_graph = None
        self._handlers: Dict[AgentKind, Handler] = {
            AgentKind.SLIDE_MASTER: self._slides,
            AgentKind.WEB_ARCHITECT: self._web,
            AgentKind.VISUAL_DESIGNER: self._design,
            AgentKind.RESEARCHER: self._research,
            AgentKind.YOUTUBE_RESEARCHER: self._video_research,
            AgentKind.ROADMAP_STRATEGIST: self._roadmap,
        }

    def supports(self, agent: AgentKind) -> bool:
        return agent in self._handlers

    def dispatch(
        self,
        prompt: str,
        agent: AgentKind,
        plan_context: Optional[ExecutionPlan] = None,
    ) -> ResponseEnvelope:
        if not self.supports(agent):
            raise UnsupportedAgentError(
                f"Agent {agent.value} has no dispatch contract yet", agent=agent.value
            )
        handler = self._handlers[agent]

        logger.info("Dispatching %s (plan context: %s)", agent.value, "yes" if plan_context else "no")
        try:
            envelope = handler(prompt, plan_context)
        except AgentExecutionError:
            raise
        except MalformedOutputError as exc:
            logger.error("Agent %s returned an invalid payload: %s", agent.value, exc)
            raise AgentExecutionError(
                f"Agent {agent.value} returned an invalid payload: {exc}",
                agent=agent.value,
                context={"provider": exc.provider, **exc.context},
            ) from exc
        except ServiceError as exc:
            logger.error("Agent %s failed: %s", agent.value, exc)
            raise AgentExecutionError(
                f"Agent {agent.value} failed: {exc}",
                agent=agent.value,
                context={"provider": exc.provider, **exc.context},
            ) from exc
        except ValidationError as exc:
            logger.error("Agent %s returned an invalid payload: %s", agent.value, exc)
            raise AgentExecutionError(
                f"Agent {agent.value} returned an invalid payload",
                agent=agent.value,
                context={"errors": exc.errors(include_url=False)},
            ) from exc

        logger.info("Agent %s produced a %s envelope", agent.value, envelope.type.value)
        return envelope

    # ---- per-kind handlers ----

    def _slides(self, prompt: str, plan: Optional[ExecutionPlan]) -> SlideDeckEnvelope:
        result = self.service.generate(
            prompt,
            system_instruction=with_plan(SLIDE_MASTER_PROMPT, plan),
            schema=SLIDE_DECK_SCHEMA,
            response_model=SlideDeckReply,
        )
        reply = result.data
        return SlideDeckEnvelope(
            content=SlideDeck(slides=reply.slides),
            explanation=reply.explanation or "Execution complete.",
        )

    def _web(self, prompt: str, plan: Optional[ExecutionPlan]) -> WebBuildEnvelope:
        result = self.service.generate(
            prompt,
            system_instruction=with_plan(WEB_ARCHITECT_PROMPT, plan),
            schema=WEB_BUILD_SCHEMA,
            response_model=WebBuildReply,
        )
        reply = result.data
        return WebBuildEnvelope(
            content=WebBuild(html=reply.html, css=reply.css),
            explanation=reply.explanation or "Execution complete.",
        )

    def _design(self, prompt: str, plan: Optional[ExecutionPlan]) -> VisualDesignEnvelope:
        design_task = f"Design task: {prompt}. {plan_reference(plan)}".strip()
        result = self.service.generate(
            design_task,
            system_instruction=VISUAL_DESIGNER_PROMPT,
            tier=ModelTier.IMAGE,
        )
        if not result.images:
            raise ImageExtractionError(
                "Image model response contained no image part",
                agent=AgentKind.VISUAL_DESIGNER.value,
            )
        image = result.images[0]
        encoded = base64.b64encode(image.data).decode("ascii")
        return VisualDesignEnvelope(
            content=VisualDesign(imageUrl=f"data:{image.mime_type};base64,{encoded}", prompt=prompt),
            explanation=result.text or "Design synthesized.",
        )

    def _research(self, prompt: str, plan: Optional[ExecutionPlan]) -> ResearchReportEnvelope:
        result = self.service.generate(
            prompt,
            system_instruction=with_plan(RESEARCHER_PROMPT, plan),
            tier=ModelTier.REASONING,
            grounded=True,
        )
        return ResearchReportEnvelope(
            content=ResearchReport(content=result.text, sources=list(result.citations)),
            explanation="Synthesis finished.",
        )

    def _video_research(self, prompt: str, plan: Optional[ExecutionPlan]) -> VideoAnalysisEnvelope:
        if self._video_graph is None:
            self._video_graph = build_video_research_graph(self.service, self.video_search)
        final_state = self._video_graph.invoke(
            {"query": prompt, "instruction": with_plan(VIDEO_STRATEGIST_PROMPT, plan)}
        )
        return VideoAnalysisEnvelope(
            content=VideoAnalysis(
                videos=final_state.get("videos") or [],
                analysis=final_state.get("analysis") or "",
            ),
            explanation="Analysis complete.",
        )

    def _roadmap(self, prompt: str, plan: Optional[ExecutionPlan]) -> RoadmapEnvelope:
        instruction = ROADMAP_STRATEGIST_PROMPT.format(max_depth=self.roadmap_max_depth)
        result = self.service.generate(
            prompt,
            system_instruction=with_plan(instruction, plan),
            schema=roadmap_schema(self.roadmap_max_depth),
            response_model=Roadmap,
            validation_context={"max_depth": self.roadmap_max_depth},
            tier=ModelTier.REASONING,
        )
        roadmap = result.data
        return RoadmapEnvelope(content=roadmap, explanation=roadmap.explanation or "Execution complete.")


__all__ = ["AgentDispatcher", "resolve_primary_agent"]
