"""Exception hierarchy shared by the adapters, the dispatcher and the hub."""

from __future__ import annotations

from typing import Any, Dict, Optional


class OmniAgentError(Exception):
    """Base exception for all hub errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(OmniAgentError):
    """Raised when a required setting (usually an API key) is missing."""


# ---- adapter level ----


class ServiceError(OmniAgentError):
    """Raised when an external generation call fails."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.provider = provider


class TransportError(ServiceError):
    """The provider could not be reached or rejected the request."""


class MalformedOutputError(ServiceError):
    """The provider answered, but not with the JSON shape that was asked for."""


class EmptyResultError(ServiceError):
    """The provider answered with no usable content."""


class CapabilityError(ServiceError):
    """The provider cannot serve the requested tier or tool."""


# ---- core level ----


class PlanGenerationError(OmniAgentError):
    """Raised when an execution plan cannot be produced."""


class AgentExecutionError(OmniAgentError):
    """Raised when an agent dispatch cannot produce an envelope."""

    def __init__(
        self,
        message: str,
        agent: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.agent = agent


class ImageExtractionError(AgentExecutionError):
    """The image model answered without an inline image part."""


class UnsupportedAgentError(AgentExecutionError):
    """The agent kind has no dispatch contract."""


# ---- hub surface ----


class HubError(OmniAgentError):
    """Input rejected by the hub before any service call."""

    status_code = 400


class HubBusyError(HubError):
    status_code = 409


class InvalidTransitionError(HubError):
    status_code = 409


class InvalidApprovalError(HubError):
    status_code = 422


def wrap_service_error(exc: Exception, provider: str) -> ServiceError:
    """Convert an SDK exception into a TransportError with context."""
    if isinstance(exc, ServiceError):
        return exc

    context: Dict[str, Any] = {
        "original_error": str(exc),
        "error_type": type(exc).__name__,
    }
    if hasattr(exc, "status_code"):
        context["status_code"] = exc.status_code
    if hasattr(exc, "code"):
        context["code"] = str(exc.code)
    return TransportError(f"{provider} request failed: {exc}", provider, context)


__all__ = [
    "AgentExecutionError",
    "CapabilityError",
    "ConfigurationError",
    "EmptyResultError",
    "HubBusyError",
    "HubError",
    "ImageExtractionError",
    "InvalidApprovalError",
    "InvalidTransitionError",
    "MalformedOutputError",
    "OmniAgentError",
    "PlanGenerationError",
    "ServiceError",
    "TransportError",
    "UnsupportedAgentError",
    "wrap_service_error",
]
