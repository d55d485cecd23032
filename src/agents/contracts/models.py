"""Pydantic models for plans, agent payloads and the response envelope."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationInfo, field_validator, model_validator

from .roadmap import duplicate_node_ids, prune_roadmap_payload


class AgentKind(str, Enum):
    ORCHESTRATOR = "ORCHESTRATOR"
    SLIDE_MASTER = "SLIDE_MASTER"
    WEB_ARCHITECT = "WEB_ARCHITECT"
    VISUAL_DESIGNER = "VISUAL_DESIGNER"
    RESEARCHER = "RESEARCHER"
    YOUTUBE_RESEARCHER = "YOUTUBE_RESEARCHER"
    TASK_SCHEDULER = "TASK_SCHEDULER"
    ROADMAP_STRATEGIST = "ROADMAP_STRATEGIST"

    @classmethod
    def parse(cls, raw: object) -> "AgentKind":
        """Accept `AgentKind` members or loose tokens such as `slide master`."""
        if isinstance(raw, cls):
            return raw
        token = str(raw or "").strip().upper().replace("-", "_").replace(" ", "_")
        return cls(token)


class Complexity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


# ---- plans ----


class PlanStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    title: str
    description: str
    agent: AgentKind

    @field_validator("agent", mode="before")
    @classmethod
    def _normalise_agent(cls, value: object) -> AgentKind:
        return AgentKind.parse(value)


class ExecutionPlan(BaseModel):
    """A human-approvable breakdown of one request into agent-bound steps."""

    model_config = ConfigDict(frozen=True)

    objective: str
    technicalStack: List[str] = Field(default_factory=list)
    estimatedComplexity: Complexity
    steps: List[PlanStep] = Field(default_factory=list)

    @field_validator("estimatedComplexity", mode="before")
    @classmethod
    def _normalise_complexity(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @model_validator(mode="after")
    def _unique_step_ids(self) -> "ExecutionPlan":
        seen: set[str] = set()
        for step in self.steps:
            if step.id in seen:
                raise ValueError(f"duplicate step id {step.id!r}")
            seen.add(step.id)
        return self

    @property
    def is_approvable(self) -> bool:
        return bool(self.steps)


# ---- transcript ----


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str
    plan: Optional[ExecutionPlan] = None
    agent: Optional[AgentKind] = None


# ---- agent payloads ----


class Slide(BaseModel):
    title: str = Field(min_length=1)
    content: str = ""
    points: List[str] = Field(default_factory=list)


class SlideDeck(BaseModel):
    slides: List[Slide] = Field(min_length=1)


class SlideDeckReply(SlideDeck):
    """What the slides agent returns: the deck plus a short note."""

    explanation: str = ""


class WebBuild(BaseModel):
    html: str = Field(min_length=1)
    css: Optional[str] = None


class WebBuildReply(WebBuild):
    explanation: str = ""


class VisualDesign(BaseModel):
    imageUrl: str = Field(min_length=1)
    prompt: str


class ResearchReport(BaseModel):
    content: str
    sources: List[str] = Field(default_factory=list)


class VideoRecord(BaseModel):
    id: str
    title: str
    thumbnail: str = ""
    channelTitle: str = ""
    publishedAt: str = ""
    description: str = ""


class VideoAnalysis(BaseModel):
    videos: List[VideoRecord] = Field(default_factory=list)
    analysis: str = Field(min_length=1)


class RoadmapNode(BaseModel):
    id: str = Field(min_length=1)
    label: str
    description: str
    duration: str
    skills: List[str] = Field(default_factory=list)
    children: List["RoadmapNode"] = Field(default_factory=list)

    @field_validator("children", mode="before")
    @classmethod
    def _none_is_leaf(cls, value: object) -> object:
        return [] if value is None else value


class Roadmap(BaseModel):
    roadmap: RoadmapNode
    explanation: str = ""

    @field_validator("roadmap", mode="before")
    @classmethod
    def _bound_depth(cls, value: object, info: ValidationInfo) -> object:
        # Cut the raw tree before nested validation when a bound is supplied.
        max_depth = (info.context or {}).get("max_depth")
        if max_depth is None:
            return value
        return prune_roadmap_payload(value, max_depth)

    @model_validator(mode="after")
    def _no_repeated_nodes(self) -> "Roadmap":
        duplicates = duplicate_node_ids(self.roadmap)
        if duplicates:
            raise ValueError(f"roadmap node ids repeat: {', '.join(sorted(duplicates))}")
        return self


# ---- envelope ----


class _Envelope(BaseModel):
    model_config = ConfigDict(frozen=True)

    explanation: str = ""


class SlideDeckEnvelope(_Envelope):
    type: Literal[AgentKind.SLIDE_MASTER] = AgentKind.SLIDE_MASTER
    content: SlideDeck


class WebBuildEnvelope(_Envelope):
    type: Literal[AgentKind.WEB_ARCHITECT] = AgentKind.WEB_ARCHITECT
    content: WebBuild


class VisualDesignEnvelope(_Envelope):
    type: Literal[AgentKind.VISUAL_DESIGNER] = AgentKind.VISUAL_DESIGNER
    content: VisualDesign


class ResearchReportEnvelope(_Envelope):
    type: Literal[AgentKind.RESEARCHER] = AgentKind.RESEARCHER
    content: ResearchReport


class VideoAnalysisEnvelope(_Envelope):
    type: Literal[AgentKind.YOUTUBE_RESEARCHER] = AgentKind.YOUTUBE_RESEARCHER
    content: VideoAnalysis


class RoadmapEnvelope(_Envelope):
    type: Literal[AgentKind.ROADMAP_STRATEGIST] = AgentKind.ROADMAP_STRATEGIST
    content: Roadmap


ResponseEnvelope = Annotated[
    Union[
        SlideDeckEnvelope,
        WebBuildEnvelope,
        VisualDesignEnvelope,
        ResearchReportEnvelope,
        VideoAnalysisEnvelope,
        RoadmapEnvelope,
    ],
    Field(discriminator="type"),
]

envelope_adapter: TypeAdapter = TypeAdapter(ResponseEnvelope)


__all__ = [
    "AgentKind",
    "Complexity",
    "ExecutionPlan",
    "Message",
    "PlanStep",
    "ResearchReport",
    "ResearchReportEnvelope",
    "ResponseEnvelope",
    "Roadmap",
    "RoadmapEnvelope",
    "RoadmapNode",
    "Slide",
    "SlideDeck",
    "SlideDeckEnvelope",
    "SlideDeckReply",
    "VideoAnalysis",
    "VideoAnalysisEnvelope",
    "VideoRecord",
    "VisualDesign",
    "VisualDesignEnvelope",
    "WebBuild",
    "WebBuildEnvelope",
    "WebBuildReply",
    "envelope_adapter",
]
