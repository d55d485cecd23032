"""Hub state machine and its HTTP surface."""

from __future__ import annotations

from importlib import import_module
from typing import Any

from .registry import HubRegistry, build_hub_session
from .session import HubSession
from .state import AppContext, HubSnapshot, WORKSPACE_BY_AGENT, workspace_for


def get_blueprint() -> Any:
    """Import lazily so the core stays importable without Flask wiring."""
    routes = import_module("src.agents.hub.routes")
    return routes.hub_bp


__all__ = [
    "AppContext",
    "HubRegistry",
    "HubSession",
    "HubSnapshot",
    "WORKSPACE_BY_AGENT",
    "build_hub_session",
    "get_blueprint",
    "workspace_for",
]
