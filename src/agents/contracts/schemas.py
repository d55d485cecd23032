"""Response schemas handed to the generation service for JSON-mode calls.

The dialect is the OpenAPI subset Gemini accepts (`OBJECT`, `ARRAY`,
`STRING`, `required`, `enum`). They only steer JSON mode; replies are
validated against the pydantic models in `.models`.
"""

from __future__ import annotations

from typing import Any, Dict

from src.config import DEFAULT_ROADMAP_MAX_DEPTH

from .models import Complexity

_STRING: Dict[str, Any] = {"type": "STRING"}
_STRING_LIST: Dict[str, Any] = {"type": "ARRAY", "items": _STRING}

EXECUTION_PLAN_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "objective": _STRING,
        "technicalStack": _STRING_LIST,
        "estimatedComplexity": {"type": "STRING", "enum": [c.value for c in Complexity]},
        "steps": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": _STRING,
                    "title": _STRING,
                    "description": _STRING,
                    "agent": _STRING,
                },
                "required": ["id", "title", "description", "agent"],
            },
        },
    },
    "required": ["objective", "steps", "technicalStack", "estimatedComplexity"],
}

SLIDE_DECK_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "slides": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": _STRING,
                    "content": _STRING,
                    "points": _STRING_LIST,
                },
                "required": ["title", "content", "points"],
            },
        },
        "explanation": _STRING,
    },
    "required": ["slides", "explanation"],
}

WEB_BUILD_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "html": _STRING,
        "css": _STRING,
        "explanation": _STRING,
    },
    "required": ["html", "explanation"],
}

_NODE_FIELDS = ("id", "label", "description", "duration", "skills")


def roadmap_node_schema(levels: int) -> Dict[str, Any]:
    """Schema for a roadmap node with at most `levels` levels including itself."""
    if levels < 1:
        raise ValueError("levels must be >= 1")

    # Built leaf-first so the nesting is bounded by the loop, not by recursion.
    node: Dict[str, Any] = {}
    for level in range(1, levels + 1):
        properties: Dict[str, Any] = {
            "id": _STRING,
            "label": _STRING,
            "description": _STRING,
            "duration": _STRING,
            "skills": _STRING_LIST,
        }
        if level > 1:
            properties["children"] = {"type": "ARRAY", "items": node}
        node = {"type": "OBJECT", "properties": properties, "required": list(_NODE_FIELDS)}
    return node


def roadmap_schema(max_depth: int = DEFAULT_ROADMAP_MAX_DEPTH) -> Dict[str, Any]:
    return {
        "type": "OBJECT",
        "properties": {
            "roadmap": roadmap_node_schema(max_depth),
            "explanation": _STRING,
        },
        "required": ["roadmap", "explanation"],
    }


__all__ = [
    "EXECUTION_PLAN_SCHEMA",
    "SLIDE_DECK_SCHEMA",
    "WEB_BUILD_SCHEMA",
    "roadmap_node_schema",
    "roadmap_schema",
]
