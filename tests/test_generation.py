import json

import pytest

from src.agents.contracts import SLIDE_DECK_SCHEMA, ExecutionPlan, Roadmap, SlideDeckReply, roadmap_depth
from src.errors import EmptyResultError, MalformedOutputError
from src.services.generation import InlineImage, ModelTier, RawGeneration, strip_json_fence

from conftest import SLIDES_PAYLOAD, FakeGenerationService, plan_payload, roadmap_chain


@pytest.mark.parametrize(
    "raw",
    [
        '{"a": 1}',
        '```json\n{"a": 1}\n```',
        '```\n{"a": 1}\n```',
        '  {"a": 1}  ',
    ],
)
def test_strip_json_fence(raw):
    assert strip_json_fence(raw) == '{"a": 1}'


def test_generate_validates_with_response_model():
    service = FakeGenerationService("```json\n" + json.dumps(SLIDES_PAYLOAD) + "\n```")

    result = service.generate(
        "deck", system_instruction="sys", schema=SLIDE_DECK_SCHEMA, response_model=SlideDeckReply
    )

    assert isinstance(result.data, SlideDeckReply)
    assert [slide.title for slide in result.data.slides] == ["Why solar now", "Our edge"]
    assert result.data.explanation == "Two-slide pitch outline."
    assert service.calls[0]["schema"] is SLIDE_DECK_SCHEMA
    assert service.calls[0]["tier"] is ModelTier.TEXT


def test_schema_hint_alone_does_not_parse():
    service = FakeGenerationService(SLIDES_PAYLOAD)
    result = service.generate("deck", system_instruction="sys", schema=SLIDE_DECK_SCHEMA)
    assert result.data is None


def test_generate_rejects_invalid_json():
    service = FakeGenerationService("Sure! Here is your deck.")
    with pytest.raises(MalformedOutputError):
        service.generate("deck", system_instruction="sys", response_model=SlideDeckReply)


@pytest.mark.parametrize(
    "payload",
    [
        {"explanation": "no slides"},
        {"slides": []},
        {"slides": [{"title": ""}]},
        [],
    ],
)
def test_generate_rejects_payloads_the_model_refuses(payload):
    service = FakeGenerationService(payload)
    with pytest.raises(MalformedOutputError) as excinfo:
        service.generate("deck", system_instruction="sys", response_model=SlideDeckReply)
    assert excinfo.value.provider == "fake"
    assert excinfo.value.context["errors"]


def test_plan_enum_and_agent_are_enforced_at_the_boundary():
    payload = plan_payload("SLIDE_MASTER")
    payload["estimatedComplexity"] = "Trivial"
    service = FakeGenerationService(payload, plan_payload("POET"))
    for _ in range(2):
        with pytest.raises(MalformedOutputError, match="ExecutionPlan"):
            service.generate("plan", system_instruction="sys", response_model=ExecutionPlan)


def test_validation_context_bounds_roadmap_depth():
    service = FakeGenerationService({"roadmap": roadmap_chain(6), "explanation": "deep"})

    result = service.generate(
        "path",
        system_instruction="sys",
        response_model=Roadmap,
        validation_context={"max_depth": 3},
    )

    assert roadmap_depth(result.data.roadmap) == 3


def test_generate_rejects_empty_output():
    service = FakeGenerationService("   ")
    with pytest.raises(EmptyResultError):
        service.generate("hello", system_instruction="sys")


def test_generate_free_text_and_image_only_results():
    service = FakeGenerationService(
        RawGeneration(text="Report", citations=["https://a", "https://a"]),
        RawGeneration(images=[InlineImage(data=b"\x89PNG")]),
    )
    text = service.generate("q", system_instruction="sys", grounded=True)
    assert text.data is None
    assert text.citations == ["https://a", "https://a"]

    image = service.generate("draw", system_instruction="sys", tier=ModelTier.IMAGE)
    assert image.text == ""
    assert image.images[0].data == b"\x89PNG"
