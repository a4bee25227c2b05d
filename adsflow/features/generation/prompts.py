"""Prompt templates for campaign generation."""

import json

from adsflow.features.generation.schema import CAMPAIGN_SCHEMA

SYSTEM_INSTRUCTION = (
    "You are a Google Ads specialist. Your task is to build a Search Network "
    "campaign structure, optimized for performance and relevance, based on the "
    "business description provided by the user. The response MUST be valid JSON "
    "that follows the provided schema. Be fast and concise."
)

# json_object mode has no schema parameter, so the schema travels in the prompt
SCHEMA_INSTRUCTION = (
    "Return a single JSON object that validates against this JSON Schema:\n"
    + json.dumps(CAMPAIGN_SCHEMA, ensure_ascii=False)
)


def build_user_message(prompt: str) -> str:
    return f'Business description: "{prompt.strip()}"'


def build_system_message(embed_schema: bool) -> str:
    if embed_schema:
        return f"{SYSTEM_INSTRUCTION}\n\n{SCHEMA_INSTRUCTION}"
    return SYSTEM_INSTRUCTION
