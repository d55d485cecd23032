"""Flask blueprint exposing the hub state machine as a JSON API."""

from __future__ import annotations

import html
import logging
from typing import Any, Dict, Optional

from flask import Blueprint, Response, current_app, jsonify, request, session

from src.agents.contracts import AgentKind, WebBuildEnvelope
from src.agents.orchestrator import list_agents
from src.config import get_settings
from src.errors import HubError, OmniAgentError

from .registry import HubRegistry, build_hub_session
from .session import HubSession
from .state import AppContext, HubSnapshot

logger = logging.getLogger(__name__)

hub_bp = Blueprint("hub", __name__, url_prefix="/hub")

_REGISTRY_KEY = "omniagent_hubs"
_SESSION_KEY = "hub_id"

# Generated markup is untrusted; it only ever renders inside this sandbox.
_PREVIEW_CSP = "sandbox allow-scripts; default-src 'none'; img-src data: https:; style-src 'unsafe-inline'; script-src 'unsafe-inline'"


def _registry() -> HubRegistry:
    registry = current_app.extensions.get(_REGISTRY_KEY)
    if registry is None:
        settings = get_settings()
        registry = HubRegistry(
            current_app.config.get("HUB_FACTORY") or build_hub_session,
            max_sessions=current_app.config.get("HUB_MAX_SESSIONS", settings.hub_max_sessions),
            idle_seconds=current_app.config.get("HUB_IDLE_SECONDS", settings.hub_idle_seconds),
        )
        current_app.extensions[_REGISTRY_KEY] = registry
    return registry


def _current_hub(create: bool = True) -> Optional[HubSession]:
    """Hub bound to this browser session; read-only routes pass `create=False`."""
    registry = _registry()
    hub = registry.get(session.get(_SESSION_KEY))
    if hub is None and create:
        hub_id, hub = registry.create()
        session[_SESSION_KEY] = hub_id
    return hub


def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _text_field() -> str:
    text = _payload().get("text")
    if not isinstance(text, str) or not text.strip():
        raise ValueError("'text' is required")
    return text


def _state_response(hub: Optional[HubSession]):
    snapshot = hub.snapshot() if hub is not None else HubSnapshot(context=AppContext.HUB, transcript=[])
    return jsonify(snapshot.model_dump(mode="json"))


@hub_bp.errorhandler(HubError)
def _hub_error(exc: HubError):
    return jsonify({"error": str(exc), "kind": type(exc).__name__, "context": exc.context}), exc.status_code


@hub_bp.errorhandler(ValueError)
def _bad_request(exc: ValueError):
    return jsonify({"error": str(exc), "kind": "BadRequest"}), 400


@hub_bp.errorhandler(OmniAgentError)
def _service_unavailable(exc: OmniAgentError):
    logger.exception("Hub request failed")
    return jsonify({"error": str(exc), "kind": type(exc).__name__}), 503


@hub_bp.route("/agents", methods=["GET"])
def agents():
    return jsonify({"agents": list_agents()})


@hub_bp.route("/state", methods=["GET"])
def state():
    return _state_response(_current_hub(create=False))


@hub_bp.route("/mode", methods=["POST", "DELETE"])
def mode():
    hub = _current_hub()
    if request.method == "DELETE":
        hub.clear_mode()
    else:
        raw = _payload().get("agent")
        try:
            agent = AgentKind.parse(raw)
        except ValueError as exc:
            raise ValueError(f"Unknown agent {raw!r}") from exc
        hub.select_mode(agent)
    return _state_response(hub)


@hub_bp.route("/submit", methods=["POST"])
def submit():
    hub = _current_hub()
    hub.submit(_text_field())
    return _state_response(hub)


@hub_bp.route("/revise", methods=["POST"])
def revise():
    hub = _current_hub()
    hub.revise(_text_field())
    return _state_response(hub)


@hub_bp.route("/approve", methods=["POST"])
def approve():
    hub = _current_hub()
    hub.approve()
    return _state_response(hub)


@hub_bp.route("/edit", methods=["POST"])
def edit():
    hub = _current_hub()
    hub.edit(_text_field())
    return _state_response(hub)


@hub_bp.route("/reset", methods=["POST"])
def reset():
    hub = _current_hub(create=False)
    if hub is not None:
        hub.reset()
        _registry().discard(session.pop(_SESSION_KEY, None))
    return _state_response(None)


@hub_bp.route("/preview", methods=["GET"])
def preview():
    """Serve the current web build as an isolated, sandboxed document."""
    hub = _current_hub(create=False)
    envelope = hub.envelope if hub is not None else None
    if hub is None or hub.context is not AppContext.WEB or not isinstance(envelope, WebBuildEnvelope):
        return jsonify({"error": "No web build to preview", "kind": "NotFound"}), 404

    body = envelope.content.html
    if envelope.content.css:
        body = f"<style>{envelope.content.css}</style>\n{body}"
    document = (
        "<!doctype html>\n"
        f"<!-- {html.escape(envelope.explanation)} -->\n"
        f"{body}"
    )
    response = Response(document, mimetype="text/html")
    response.headers["Content-Security-Policy"] = _PREVIEW_CSP
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


__all__ = ["hub_bp"]
