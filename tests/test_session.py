import pytest

from src.agents.contracts import AgentKind, ExecutionPlan, WebBuildEnvelope, WebBuild
from src.agents.hub import AppContext, HubSession
from src.agents.hub.session import INVALID_PLAN_NOTICE
from src.agents.orchestrator import AgentDispatcher
from src.agents.orchestrator.prompts import PLAN_FAILED_MESSAGE
from src.errors import HubBusyError, InvalidApprovalError, InvalidTransitionError, TransportError

from conftest import SLIDES_PAYLOAD, WEB_PAYLOAD, FakeGenerationService, plan_payload


def test_initial_state_is_hub(hub):
    snapshot = hub.snapshot()
    assert snapshot.context is AppContext.HUB
    assert snapshot.transcript == []
    assert snapshot.envelope is None
    assert not snapshot.busy


@pytest.mark.parametrize(
    "mode, reply, expected",
    [
        (AgentKind.RESEARCHER, "# Report", AppContext.RESEARCH),
        (AgentKind.YOUTUBE_RESEARCHER, "Video analysis", AppContext.YOUTUBE),
    ],
)
def test_research_modes_dispatch_directly(hub, fake_service, mode, reply, expected):
    hub.select_mode(mode)
    fake_service.queue(reply)

    snapshot = hub.submit("solar startups")

    assert snapshot.context is expected
    assert snapshot.envelope.type is mode
    assert snapshot.transcript == []
    assert len(fake_service.calls) == 1
    assert fake_service.calls[0]["schema"] is None


@pytest.mark.parametrize(
    "mode",
    [None, AgentKind.SLIDE_MASTER, AgentKind.WEB_ARCHITECT, AgentKind.VISUAL_DESIGNER,
     AgentKind.ROADMAP_STRATEGIST, AgentKind.TASK_SCHEDULER, AgentKind.ORCHESTRATOR],
)
def test_other_modes_enter_planning(hub, fake_service, mode):
    if mode is not None:
        hub.select_mode(mode)
    fake_service.queue(plan_payload("SLIDE_MASTER"))

    snapshot = hub.submit("Build me a deck")

    assert snapshot.context is AppContext.CHAT_PLANNING
    assert [m.role for m in snapshot.transcript] == ["user", "assistant"]
    assert snapshot.transcript[1].plan is not None
    assert snapshot.transcript[1].agent is AgentKind.SLIDE_MASTER


def test_direct_dispatch_failure_returns_to_hub(hub, fake_service):
    hub.select_mode(AgentKind.RESEARCHER)
    fake_service.queue(TransportError("down", "fake"))

    snapshot = hub.submit("solar")

    assert snapshot.context is AppContext.HUB
    assert snapshot.envelope is None
    assert snapshot.transcript == []
    assert snapshot.notice.startswith("Execution interrupted")
    assert snapshot.active_mode is AgentKind.RESEARCHER


def test_plan_failure_appends_apology_and_stays_in_planning(hub, fake_service):
    fake_service.queue("not json")

    snapshot = hub.submit("Build me a deck")

    assert snapshot.context is AppContext.CHAT_PLANNING
    assert snapshot.transcript[-1].role == "assistant"
    assert snapshot.transcript[-1].content == PLAN_FAILED_MESSAGE
    assert snapshot.transcript[-1].plan is None


def test_roundtrip_pitch_deck(hub, fake_service):
    fake_service.queue(plan_payload("SLIDE_MASTER", "WEB_ARCHITECT"), SLIDES_PAYLOAD)

    hub.submit("Build me a 5-slide pitch deck about solar startups")
    plan = hub.latest_plan()
    assert any(step.agent is AgentKind.SLIDE_MASTER for step in plan.steps)

    snapshot = hub.approve()

    assert snapshot.context is AppContext.SLIDES
    assert snapshot.envelope.type is AgentKind.SLIDE_MASTER
    assert len(snapshot.envelope.content.slides) >= 1
    assert all(slide.title for slide in snapshot.envelope.content.slides)
    dispatch_call = fake_service.calls[1]
    assert dispatch_call["prompt"] == "Build me a 5-slide pitch deck about solar startups"
    assert "Follow this approved plan" in dispatch_call["system_instruction"]


def test_forced_mode_wins_the_tie_break(hub, fake_service):
    hub.select_mode(AgentKind.WEB_ARCHITECT)
    fake_service.queue(plan_payload("SLIDE_MASTER", "WEB_ARCHITECT"), WEB_PAYLOAD)

    hub.submit("Solar landing page")
    snapshot = hub.approve()

    assert snapshot.context is AppContext.WEB
    assert snapshot.envelope.type is AgentKind.WEB_ARCHITECT


def test_revision_replaces_latest_plan_and_keeps_the_old_one(hub, fake_service):
    fake_service.queue(
        plan_payload("SLIDE_MASTER", objective="first"),
        plan_payload("WEB_ARCHITECT", objective="second"),
    )
    hub.submit("Solar pitch")
    first_message = hub.transcript[1]
    first_plan = first_message.plan

    snapshot = hub.revise("Make it a website instead")

    plans = [m for m in snapshot.transcript if m.plan is not None]
    assert len(plans) == 2
    assert hub.latest_plan().objective == "second"
    assert hub.transcript[1] is first_message
    assert hub.transcript[1].plan is first_plan
    assert first_plan.objective == "first"
    assert fake_service.calls[1]["prompt"].startswith(
        "User Prompt: Original: Solar pitch. Revision: Make it a website instead."
    )
    assert hub.last_prompt == "Original: Solar pitch. Revision: Make it a website instead"


def test_revision_failure_appends_apology(hub, fake_service):
    fake_service.queue(plan_payload("SLIDE_MASTER"), TransportError("down", "fake"))
    hub.submit("Solar pitch")

    snapshot = hub.revise("shorter")

    assert snapshot.transcript[-1].content == PLAN_FAILED_MESSAGE
    assert hub.latest_plan() is hub.transcript[1].plan
    assert hub.last_prompt == "Solar pitch"


def test_approval_after_failed_revision_uses_the_prompt_behind_the_plan(hub, fake_service):
    fake_service.queue(plan_payload("SLIDE_MASTER"), "not json", SLIDES_PAYLOAD)
    hub.submit("Solar pitch")
    hub.revise("Make it about wind instead")

    snapshot = hub.approve()

    assert snapshot.context is AppContext.SLIDES
    assert fake_service.calls[-1]["prompt"] == "Solar pitch"


def test_approval_without_plan_is_rejected_before_dispatch(hub, fake_service):
    fake_service.queue("not json")
    hub.submit("Build me a deck")
    calls_before = len(fake_service.calls)

    with pytest.raises(InvalidApprovalError):
        hub.approve()

    assert len(fake_service.calls) == calls_before
    assert hub.context is AppContext.CHAT_PLANNING
    assert hub.notice == INVALID_PLAN_NOTICE


def test_approval_with_empty_plan_is_rejected(dispatcher, fake_service):
    empty = ExecutionPlan.model_validate(plan_payload())
    hub = HubSession(dispatcher, plan_generator=lambda prompt, mode: empty)
    hub.submit("anything")

    with pytest.raises(InvalidApprovalError):
        hub.approve()

    assert fake_service.calls == []
    assert hub.context is AppContext.CHAT_PLANNING


def test_approval_failure_returns_to_hub_keeping_transcript(hub, fake_service):
    fake_service.queue(plan_payload("SLIDE_MASTER"), TransportError("down", "fake"))
    hub.submit("Solar pitch")

    snapshot = hub.approve()

    assert snapshot.context is AppContext.HUB
    assert snapshot.envelope is None
    assert len(snapshot.transcript) == 2
    assert snapshot.notice.startswith("Execution interrupted")


def test_plan_bound_to_unsupported_agent_falls_back_to_hub(hub, fake_service):
    fake_service.queue(plan_payload("TASK_SCHEDULER"))
    hub.submit("Schedule my week")

    snapshot = hub.approve()

    assert snapshot.context is AppContext.HUB
    assert "TASK_SCHEDULER" in snapshot.notice
    assert len(fake_service.calls) == 1


def test_workspace_edit_replaces_envelope(hub, fake_service):
    fake_service.queue(plan_payload("WEB_ARCHITECT"), WEB_PAYLOAD, dict(WEB_PAYLOAD, html="<main>v2</main>"))
    hub.submit("Solar landing page")
    hub.approve()

    snapshot = hub.edit("Make the heading bigger")

    assert snapshot.context is AppContext.WEB
    assert snapshot.envelope.content.html == "<main>v2</main>"
    assert fake_service.calls[-1]["prompt"] == "Make the heading bigger"
    assert "Follow this approved plan" not in fake_service.calls[-1]["system_instruction"]


def test_workspace_edit_failure_keeps_previous_envelope(hub, fake_service):
    fake_service.queue(plan_payload("WEB_ARCHITECT"), WEB_PAYLOAD, TransportError("down", "fake"))
    hub.submit("Solar landing page")
    previous = hub.approve().envelope

    snapshot = hub.edit("Break it")

    assert snapshot.context is AppContext.WEB
    assert snapshot.envelope == previous
    assert snapshot.notice.startswith("Edit failed")


def test_inputs_are_only_legal_in_their_context(hub, fake_service):
    with pytest.raises(InvalidTransitionError):
        hub.revise("more")
    with pytest.raises(InvalidTransitionError):
        hub.approve()
    with pytest.raises(InvalidTransitionError):
        hub.edit("bigger")

    fake_service.queue(plan_payload("SLIDE_MASTER"))
    hub.submit("deck")
    with pytest.raises(InvalidTransitionError):
        hub.submit("another")
    with pytest.raises(InvalidTransitionError):
        hub.select_mode(AgentKind.RESEARCHER)


def test_empty_text_is_rejected(hub):
    with pytest.raises(ValueError):
        hub.submit("   ")


def test_concurrent_submission_is_rejected_while_busy(dispatcher):
    seen = {}

    def reentrant_planner(prompt, mode):
        seen["busy"] = hub.busy
        seen["activity"] = hub.snapshot().activity
        with pytest.raises(HubBusyError):
            hub.revise("second request")
        with pytest.raises(HubBusyError):
            hub.reset()
        return ExecutionPlan.model_validate(plan_payload("SLIDE_MASTER"))

    hub = HubSession(dispatcher, plan_generator=reentrant_planner)
    snapshot = hub.submit("first request")

    assert seen == {"busy": True, "activity": "planning"}
    assert not snapshot.busy
    assert len(snapshot.transcript) == 2


def test_direct_dispatch_passes_through_loading(fake_videos):
    class RecordingDispatcher(AgentDispatcher):
        def dispatch(self, prompt, agent, plan_context=None):
            seen.append(hub.context)
            return super().dispatch(prompt, agent, plan_context)

    seen = []
    hub = HubSession(RecordingDispatcher(FakeGenerationService("# Report"), fake_videos))
    hub.select_mode(AgentKind.RESEARCHER)
    hub.submit("solar")

    assert seen == [AppContext.LOADING]
    assert hub.context is AppContext.RESEARCH


def test_reset_clears_everything(hub, fake_service):
    hub.select_mode(AgentKind.SLIDE_MASTER)
    fake_service.queue(plan_payload("SLIDE_MASTER"), SLIDES_PAYLOAD)
    hub.submit("deck")
    hub.approve()

    snapshot = hub.reset()

    assert snapshot.context is AppContext.HUB
    assert snapshot.active_mode is None
    assert snapshot.envelope is None
    assert snapshot.transcript == []
    assert snapshot.last_prompt == ""
    assert hub.envelope is None


def test_mismatched_envelope_falls_back_to_hub(hub):
    hub._envelope = WebBuildEnvelope(content=WebBuild(html="<p>x</p>"))
    hub._context = AppContext.SLIDES

    snapshot = hub.snapshot()

    assert snapshot.context is AppContext.HUB
    assert snapshot.envelope is None


def test_workspace_without_envelope_falls_back_to_hub(hub):
    hub._context = AppContext.ROADMAP
    assert hub.context is AppContext.HUB


def test_mode_selection_and_clearing(hub):
    hub.select_mode(AgentKind.VISUAL_DESIGNER)
    assert hub.active_mode is AgentKind.VISUAL_DESIGNER
    hub.clear_mode()
    assert hub.active_mode is None
