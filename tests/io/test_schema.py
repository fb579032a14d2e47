from __future__ import annotations

import pytest
from pydantic import ValidationError

from chatrelay.core.errors import InvalidGenerationRequest
from chatrelay.io.schema import GenerationRequest, Turn, coerce_request


def test_generation_request_keeps_unknown_fields_as_passthrough() -> None:
    request = GenerationRequest.model_validate(
        {"turns": [{"role": "user", "content": "hi"}], "temperature": 0.2, "tags": ["a"]}
    )

    assert request.turns == (Turn(role="user", content="hi"),)
    assert request.has_turns
    assert request.passthrough_fields() == {"temperature": 0.2, "tags": ["a"]}


def test_passthrough_fields_returns_a_fresh_dict() -> None:
    request = GenerationRequest.model_validate({"topic": "x"})

    fields = request.passthrough_fields()
    fields["topic"] = "changed"

    assert request.passthrough_fields() == {"topic": "x"}
    assert not request.has_turns


def test_turns_preserve_unknown_roles_until_translation() -> None:
    request = GenerationRequest.model_validate({"turns": [{"role": "tool", "content": "42"}]})

    assert request.turns[0].role == "tool"


def test_turn_content_defaults_to_empty_string() -> None:
    assert Turn(role="user").content == ""


def test_generation_request_is_frozen() -> None:
    request = GenerationRequest.model_validate({"turns": []})

    with pytest.raises(ValidationError):
        request.turns = ()  # type: ignore[misc]


def test_coerce_request_wraps_validation_errors() -> None:
    with pytest.raises(InvalidGenerationRequest) as excinfo:
        coerce_request({"turns": [{"role": "user", "content": 5}]})

    assert isinstance(excinfo.value.__cause__, ValidationError)


def test_coerce_request_rejects_non_mappings() -> None:
    with pytest.raises(InvalidGenerationRequest):
        coerce_request(["turns"])  # type: ignore[arg-type]


def test_coerce_request_returns_models_unchanged() -> None:
    request = GenerationRequest()

    assert coerce_request(request) is request


def test_unknown_role_turns_accept_any_content() -> None:
    request = GenerationRequest.model_validate(
        {"turns": [{"role": "user", "content": "hi"}, {"role": "tool", "content": None}]}
    )

    assert request.turns[1].content is None
    assert not request.turns[1].forwarded
    assert request.turns[0].forwarded


def test_forwarded_turns_require_string_content() -> None:
    with pytest.raises(InvalidGenerationRequest):
        coerce_request({"turns": [{"role": "assistant", "content": {"parts": []}}]})
