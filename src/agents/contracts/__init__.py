from .models import (
    AgentKind,
    Complexity,
    ExecutionPlan,
    Message,
    PlanStep,
    ResearchReport,
    ResearchReportEnvelope,
    ResponseEnvelope,
    Roadmap,
    RoadmapEnvelope,
    RoadmapNode,
    Slide,
    SlideDeck,
    SlideDeckEnvelope,
    SlideDeckReply,
    VideoAnalysis,
    VideoAnalysisEnvelope,
    VideoRecord,
    VisualDesign,
    VisualDesignEnvelope,
    WebBuild,
    WebBuildEnvelope,
    WebBuildReply,
    envelope_adapter,
)
from .roadmap import duplicate_node_ids, iter_nodes, prune_roadmap_payload, roadmap_depth
from .schemas import (
    EXECUTION_PLAN_SCHEMA,
    SLIDE_DECK_SCHEMA,
    WEB_BUILD_SCHEMA,
    roadmap_node_schema,
    roadmap_schema,
)

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
    "duplicate_node_ids",
    "iter_nodes",
    "prune_roadmap_payload",
    "roadmap_depth",
    "EXECUTION_PLAN_SCHEMA",
    "SLIDE_DECK_SCHEMA",
    "WEB_BUILD_SCHEMA",
    "roadmap_node_schema",
    "roadmap_schema",
]
