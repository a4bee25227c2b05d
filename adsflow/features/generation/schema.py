"""
JSON Schema for a generated campaign.

Sent to the generator with every request and mirrored by
adsflow.models.campaign.CampaignDraft. Changing one without the other
breaks parsing of generator output.
"""

def _string_list(description: str) -> dict:
    return {"type": "array", "items": {"type": "string"}, "description": description}


CAMPAIGN_SCHEMA = {
    "type": "object",
    "properties": {
        "finalUrl": {
            "type": "string",
            "description": "A relevant final URL for the product or service, e.g. https://example.com/product",
        },
        "displayPath1": {"type": "string", "description": "First display path segment, up to 15 characters."},
        "displayPath2": {"type": "string", "description": "Second display path segment, up to 15 characters."},
        "headlines": _string_list("8 ad headlines, each up to 30 characters."),
        "descriptions": _string_list("3 ad descriptions, each up to 90 characters."),
        "companyName": {"type": "string", "description": "The business name, up to 25 characters."},
        "keywords": {
            "type": "object",
            "properties": {
                "broad": _string_list("5 broad match keywords."),
                "phrase": _string_list("5 phrase match keywords, without quotes."),
                "exact": _string_list("5 exact match keywords, without brackets."),
            },
            "required": ["broad", "phrase", "exact"],
            "additionalProperties": False,
        },
        "sitelinks": {
            "type": "array",
            "description": "4 sitelink extensions.",
            "items": {
                "type": "object",
                "properties": {
                    "text": {"type": "string", "description": "Sitelink text, up to 25 characters."},
                    "description1": {"type": "string", "description": "First description line, up to 35 characters."},
                    "description2": {"type": "string", "description": "Second description line, up to 35 characters."},
                },
                "required": ["text", "description1", "description2"],
                "additionalProperties": False,
            },
        },
        "callouts": _string_list("6 callouts, each up to 25 characters."),
        "structuredSnippets": _string_list("6 structured snippet values, each up to 25 characters."),
        "negativeKeywords": _string_list("A list of 20 relevant negative keywords."),
    },
    "required": [
        "finalUrl",
        "displayPath1",
        "displayPath2",
        "headlines",
        "descriptions",
        "companyName",
        "keywords",
        "sitelinks",
        "callouts",
        "structuredSnippets",
        "negativeKeywords",
    ],
    "additionalProperties": False,
}

SCHEMA_NAME = "google_ads_search_campaign"
