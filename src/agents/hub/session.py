"""Context state machine for one hub conversation.

The session owns the only mutable shared state (transcript and current
envelope) and replaces both wholesale on update: the transcript is an
append-only tuple, the envelope is swapped in full. Every service call runs
under a single-flight guard; a second call while one is in flight is
rejected, never queued.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from functools import partial
from typing import Callable, Iterator, Optional, Tuple

from src.agents.contracts import AgentKind, ExecutionPlan, Message, ResponseEnvelope
from src.agents.orchestrator import (
    DIRECT_DISPATCH_AGENTS,
    AgentDispatcher,
    compose_revision_prompt,
    generate_plan,
    resolve_primary_agent,
)
from src.agents.orchestrator.prompts import (
    PLAN_FAILED_MESSAGE,
    PLAN_READY_MESSAGE,
    PLAN_REVISED_MESSAGE,
)
from src.errors import (
    AgentExecutionError,
    HubBusyError,
    InvalidApprovalError,
    InvalidTransitionError,
    PlanGenerationError,
)

from .state import WORKSPACE_CONTEXTS, AppContext, HubSnapshot, workspace_for

logger = logging.getLogger(__name__)

PlanGenerator = Callable[[str, Optional[AgentKind]], ExecutionPlan]

INVALID_PLAN_NOTICE = "System Error: Execution plan is invalid or empty."


def _require_text(text: str) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValueError("text must not be empty")
    return cleaned


class HubSession:
    def __init__(self, dispatcher: AgentDispatcher, *, plan_generator: Optional[PlanGenerator] = None) -> None:
        self.dispatcher = dispatcher
        self._generate_plan: PlanGenerator = plan_generator or partial(
            generate_plan, service=dispatcher.service
        )
        self._lock = threading.Lock()
        self._activity: Optional[str] = None
        self._context = AppContext.HUB
        self._active_mode: Optional[AgentKind] = None
        self._transcript: Tuple[Message, ...] = ()
        self._envelope: Optional[ResponseEnvelope] = None
        self._last_prompt = ""
        self._notice: Optional[str] = None

    # ---- read side ----

    @property
    def busy(self) -> bool:
        return self._activity is not None

    @property
    def context(self) -> AppContext:
        return self._guarded_context()

    @property
    def active_mode(self) -> Optional[AgentKind]:
        return self._active_mode

    @property
    def transcript(self) -> Tuple[Message, ...]:
        return self._transcript

    @property
    def envelope(self) -> Optional[ResponseEnvelope]:
        return self._envelope

    @property
    def last_prompt(self) -> str:
        return self._last_prompt

    @property
    def notice(self) -> Optional[str]:
        return self._notice

    def latest_plan(self) -> Optional[ExecutionPlan]:
        for message in reversed(self._transcript):
            if message.plan is not None:
                return message.plan
        return None

    def snapshot(self) -> HubSnapshot:
        context = self._guarded_context()
        return HubSnapshot(
            context=context,
            active_mode=self._active_mode,
            busy=self.busy,
            activity=self._activity,
            transcript=list(self._transcript),
            envelope=self._envelope if context in WORKSPACE_CONTEXTS else None,
            last_prompt=self._last_prompt,
            notice=self._notice,
        )

    def _guarded_context(self) -> AppContext:
        """Workspace contexts only render an envelope of the matching kind."""
        context = self._context
        if context in WORKSPACE_CONTEXTS:
            envelope = self._envelope
            if envelope is None or workspace_for(envelope.type) is not context:
                logger.warning(
                    "Envelope %s does not match workspace %s; falling back to hub",
                    envelope.type.value if envelope else None,
                    context.value,
                )
                self._context = AppContext.HUB
                return AppContext.HUB
        return context

    # ---- guards ----

    def _require_context(self, *allowed: AppContext) -> AppContext:
        context = self._guarded_context()
        if context not in allowed:
            expected = ", ".join(c.value for c in allowed)
            raise InvalidTransitionError(
                f"Not allowed in {context.value} (expected {expected})",
                {"context": context.value},
            )
        return context

    @contextmanager
    def _single_flight(self, activity: str) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise HubBusyError(
                f"A request is already in flight ({self._activity})",
                {"activity": self._activity},
            )
        self._activity = activity
        try:
            yield
        finally:
            self._activity = None
            self._lock.release()

    def _append(self, message: Message) -> None:
        self._transcript = self._transcript + (message,)

    def _enter_workspace(self, envelope: ResponseEnvelope) -> None:
        self._envelope = envelope
        self._context = workspace_for(envelope.type)

    # ---- transitions ----

    def select_mode(self, agent: AgentKind) -> None:
        if self.busy:
            raise HubBusyError("Cannot change mode while a request is in flight")
        self._require_context(AppContext.HUB)
        self._active_mode = agent

    def clear_mode(self) -> None:
        if self.busy:
            raise HubBusyError("Cannot change mode while a request is in flight")
        self._require_context(AppContext.HUB)
        self._active_mode = None

    def submit(self, text: str) -> HubSnapshot:
        """Hub input: direct dispatch for research modes, otherwise plan first."""
        text = _require_text(text)
        with self._single_flight("planning"):
            self._require_context(AppContext.HUB)
            self._notice = None
            self._last_prompt = text
            mode = self._active_mode

            if mode in DIRECT_DISPATCH_AGENTS:
                self._activity = "executing"
                self._context = AppContext.LOADING
                try:
                    envelope = self.dispatcher.dispatch(text, mode)
                except AgentExecutionError as exc:
                    logger.error("Direct execution failed: %s", exc)
                    self._notice = f"Execution interrupted: {exc}"
                    self._context = AppContext.HUB
                else:
                    self._enter_workspace(envelope)
                return self.snapshot()

            self._transcript = (Message(role="user", content=text),)
            self._context = AppContext.CHAT_PLANNING
            self._plan_into_transcript(text, PLAN_READY_MESSAGE)
            return self.snapshot()

    def revise(self, text: str) -> HubSnapshot:
        """Regenerate the plan from the last prompt plus a free-text revision."""
        text = _require_text(text)
        with self._single_flight("planning"):
            self._require_context(AppContext.CHAT_PLANNING)
            self._notice = None
            self._append(Message(role="user", content=text))
            composite = compose_revision_prompt(self._last_prompt, text)
            if self._plan_into_transcript(composite, PLAN_REVISED_MESSAGE):
                self._last_prompt = composite
            return self.snapshot()

    def _plan_into_transcript(self, prompt: str, success_text: str) -> bool:
        try:
            plan = self._generate_plan(prompt, self._active_mode)
        except PlanGenerationError as exc:
            logger.error("Analysis error: %s", exc)
            self._append(Message(role="assistant", content=PLAN_FAILED_MESSAGE))
            return False
        primary = plan.steps[0].agent if plan.steps else None
        self._append(Message(role="assistant", content=success_text, plan=plan, agent=primary))
        return True

    def approve(self) -> HubSnapshot:
        """Execute the most recent plan with the tie-break-selected agent."""
        with self._single_flight("executing"):
            self._require_context(AppContext.CHAT_PLANNING)
            plan = self.latest_plan()
            if plan is None or not plan.is_approvable:
                self._notice = INVALID_PLAN_NOTICE
                raise InvalidApprovalError(INVALID_PLAN_NOTICE)

            self._notice = None
            agent = resolve_primary_agent(plan, self._active_mode)
            try:
                envelope = self.dispatcher.dispatch(self._last_prompt, agent, plan)
            except AgentExecutionError as exc:
                logger.error("Execution failure: %s", exc)
                self._notice = f"Execution interrupted: {exc}"
                self._context = AppContext.HUB
            else:
                self._enter_workspace(envelope)
            return self.snapshot()

    def edit(self, text: str) -> HubSnapshot:
        """Re-dispatch an in-place edit with the current envelope's agent."""
        text = _require_text(text)
        with self._single_flight("editing"):
            self._require_context(*WORKSPACE_CONTEXTS)
            current = self._envelope
            self._notice = None
            try:
                envelope = self.dispatcher.dispatch(text, current.type)
            except AgentExecutionError as exc:
                logger.error("Workspace edit error: %s", exc)
                self._notice = f"Edit failed: {exc}"
            else:
                self._envelope = envelope
            return self.snapshot()

    def reset(self) -> HubSnapshot:
        if not self._lock.acquire(blocking=False):
            raise HubBusyError("Cannot reset while a request is in flight")
        try:
            self._context = AppContext.HUB
            self._active_mode = None
            self._envelope = None
            self._transcript = ()
            self._last_prompt = ""
            self._notice = None
        finally:
            self._lock.release()
        return self.snapshot()


__all__ = ["HubSession", "INVALID_PLAN_NOTICE"]
