"""
adsflow/features/generation/client.py

Structured campaign generation via Groq.

Sends the business description with a fixed system instruction and the
campaign JSON Schema, and parses the reply into a CampaignDraft. Every
failure (transport, timeout, empty body, bad JSON, schema mismatch)
surfaces as GenerationError. There are no internal retries.
"""

import json
import logging
from typing import Optional

import groq
from pydantic import ValidationError as PydanticValidationError

from adsflow.core.config import settings
from adsflow.features.generation.prompts import build_system_message, build_user_message
from adsflow.features.generation.schema import CAMPAIGN_SCHEMA, SCHEMA_NAME
from adsflow.models.campaign import CampaignDraft

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Single failure kind for the generation capability."""

    def __init__(self, reason: str, detail: str = ""):
        super().__init__(f"{reason}: {detail}" if detail else reason)
        self.reason = reason
        self.detail = detail


class CampaignGenerationClient:
    """Thin wrapper around the Groq chat completions API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: str = "openai/gpt-oss-20b",
        timeout: float = 60.0,
        temperature: float = 0.7,
        response_format: str = "json_schema",
        client=None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.response_format = response_format
        self._client = client

    @classmethod
    def from_settings(cls, cfg=None) -> "CampaignGenerationClient":
        cfg = cfg or settings
        return cls(
            cfg.GROQ_API_KEY,
            model=cfg.GENERATION_MODEL,
            timeout=cfg.GENERATION_TIMEOUT_SECONDS,
            temperature=cfg.GENERATION_TEMPERATURE,
            response_format=cfg.GENERATION_RESPONSE_FORMAT,
        )

    def _get_client(self):
        """Create the Groq client lazily so a missing key only fails generation."""
        if self._client is None:
            if not self.api_key:
                raise GenerationError("not_configured", "GROQ_API_KEY is not set")
            self._client = groq.Groq(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def _response_format(self) -> dict:
        if self.response_format == "json_object":
            return {"type": "json_object"}
        return {
            "type": "json_schema",
            "json_schema": {"name": SCHEMA_NAME, "schema": CAMPAIGN_SCHEMA},
        }

    def generate(self, prompt: str) -> CampaignDraft:
        """
        Generate a campaign draft for a non-empty business description.

        Raises:
            GenerationError: On any failure to obtain a conforming draft
        """
        client = self._get_client()
        embed_schema = self.response_format == "json_object"

        try:
            response = client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                response_format=self._response_format(),
                messages=[
                    {"role": "system", "content": build_system_message(embed_schema)},
                    {"role": "user", "content": build_user_message(prompt)},
                ],
                timeout=self.timeout,
            )
        except groq.APITimeoutError as exc:
            raise GenerationError("timeout", f"no response within {self.timeout}s") from exc
        except groq.GroqError as exc:
            raise GenerationError("transport", str(exc)) from exc

        if not getattr(response, "choices", None):
            raise GenerationError("empty_response", "no choices returned")

        message = response.choices[0].message
        content = getattr(message, "content", None)
        if not content or not content.strip():
            raise GenerationError("empty_response", "empty message content")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise GenerationError("malformed_response", f"{exc}: {content[:200]}") from exc

        try:
            draft = CampaignDraft.model_validate(data)
        except PydanticValidationError as exc:
            raise GenerationError("schema_violation", str(exc)[:500]) from exc

        logger.info(
            "[generation] draft parsed",
            extra={"model": self.model, "headlines": len(draft.headlines), "sitelinks": len(draft.sitelinks)},
        )
        return draft
