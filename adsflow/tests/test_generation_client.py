"""
Tests for the Groq-backed campaign generation client.

The groq SDK is never reached: a FakeGroq is injected in its place.
"""

import json
from types import SimpleNamespace

import groq
import httpx
import pytest

from adsflow.features.generation.client import CampaignGenerationClient, GenerationError
from adsflow.features.generation.schema import CAMPAIGN_SCHEMA, SCHEMA_NAME
from adsflow.tests.mocks import CAMPAIGN_PAYLOAD, FakeGroq


def make_client(fake, **kwargs):
    return CampaignGenerationClient("test-key", client=fake, **kwargs)


def test_generate_parses_draft():
    fake = FakeGroq(content=json.dumps(CAMPAIGN_PAYLOAD))
    draft = make_client(fake).generate("A bakery in Lisbon")

    assert draft.company_name == "Sweet Crumb Bakery"
    assert draft.keywords.exact == ["custom cakes lisbon", "vegan birthday cake"]
    assert draft.sitelinks[1].text == "Wedding Cakes"


def test_request_uses_json_schema_by_default():
    fake = FakeGroq(content=json.dumps(CAMPAIGN_PAYLOAD))
    make_client(fake, model="test-model", temperature=0.2, timeout=12.0).generate("A bakery")

    call = fake.completions.calls[0]
    assert call["model"] == "test-model"
    assert call["temperature"] == 0.2
    assert call["timeout"] == 12.0
    assert call["response_format"]["type"] == "json_schema"
    assert call["response_format"]["json_schema"]["name"] == SCHEMA_NAME
    assert call["response_format"]["json_schema"]["schema"] is CAMPAIGN_SCHEMA
    roles = [m["role"] for m in call["messages"]]
    assert roles == ["system", "user"]
    assert "A bakery" in call["messages"][1]["content"]


def test_json_object_mode_embeds_schema_in_prompt():
    fake = FakeGroq(content=json.dumps(CAMPAIGN_PAYLOAD))
    make_client(fake, response_format="json_object").generate("A bakery")

    call = fake.completions.calls[0]
    assert call["response_format"] == {"type": "json_object"}
    assert "negativeKeywords" in call["messages"][0]["content"]


def test_missing_api_key_fails_generation_only():
    client = CampaignGenerationClient(None)
    with pytest.raises(GenerationError) as exc_info:
        client.generate("A bakery")
    assert exc_info.value.reason == "not_configured"


@pytest.mark.parametrize("content", ["", "   ", None])
def test_empty_content_is_rejected(content):
    with pytest.raises(GenerationError) as exc_info:
        make_client(FakeGroq(content=content)).generate("A bakery")
    assert exc_info.value.reason == "empty_response"


def test_no_choices_is_rejected():
    with pytest.raises(GenerationError) as exc_info:
        make_client(FakeGroq(choices=False)).generate("A bakery")
    assert exc_info.value.reason == "empty_response"


def test_malformed_json_is_rejected():
    with pytest.raises(GenerationError) as exc_info:
        make_client(FakeGroq(content='{"finalUrl": "https://x.com", ')).generate("A bakery")
    assert exc_info.value.reason == "malformed_response"


def test_schema_violation_is_rejected():
    payload = dict(CAMPAIGN_PAYLOAD)
    del payload["keywords"]
    with pytest.raises(GenerationError) as exc_info:
        make_client(FakeGroq(content=json.dumps(payload))).generate("A bakery")
    assert exc_info.value.reason == "schema_violation"


def test_timeout_maps_to_generation_error():
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    fake = FakeGroq(error=groq.APITimeoutError(request=request))
    with pytest.raises(GenerationError) as exc_info:
        make_client(fake, timeout=5.0).generate("A bakery")
    assert exc_info.value.reason == "timeout"


def test_transport_error_maps_to_generation_error():
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    fake = FakeGroq(error=groq.APIConnectionError(request=request))
    with pytest.raises(GenerationError) as exc_info:
        make_client(fake).generate("A bakery")
    assert exc_info.value.reason == "transport"


def test_client_does_not_retry():
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    fake = FakeGroq(error=groq.APIConnectionError(request=request))
    with pytest.raises(GenerationError):
        make_client(fake).generate("A bakery")
    assert len(fake.completions.calls) == 1


def test_choice_without_message_is_rejected():
    fake = FakeGroq()
    fake.completions.create = lambda **kwargs: SimpleNamespace(choices=[SimpleNamespace(message=None)])
    with pytest.raises(GenerationError) as exc_info:
        make_client(fake).generate("A bakery")
    assert exc_info.value.reason == "empty_response"
