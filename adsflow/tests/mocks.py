import json
from types import SimpleNamespace

from adsflow.features.generation.client import GenerationError
from adsflow.models.campaign import CampaignDraft


CAMPAIGN_PAYLOAD = {
    "finalUrl": "https://bakery.example.com/cakes",
    "displayPath1": "cakes",
    "displayPath2": "custom",
    "headlines": [
        "Custom Cakes in Lisbon",
        "Order Your Birthday Cake",
        "Fresh Bakes Every Day",
    ],
    "descriptions": [
        "Handmade cakes for every occasion. Order online and pick up today.",
        "Gluten-free and vegan options baked fresh each morning.",
    ],
    "companyName": "Sweet Crumb Bakery",
    "keywords": {
        "broad": ["custom cakes", "birthday cake lisbon"],
        "phrase": ["custom cakes", "birthday cake delivery"],
        "exact": ["custom cakes lisbon", "vegan birthday cake"],
    },
    "sitelinks": [
        {"text": "Birthday Cakes", "description1": "Designs for all ages", "description2": "Order 48h ahead"},
        {"text": "Wedding Cakes", "description1": "Tiered and elegant", "description2": "Free tasting"},
    ],
    "callouts": ["Same-Day Pickup", "Vegan Options"],
    "structuredSnippets": ["Cakes", "Cupcakes", "Pastries"],
    "negativeKeywords": ["recipe", "free", "jobs"],
}


def make_draft(**overrides) -> CampaignDraft:
    payload = json.loads(json.dumps(CAMPAIGN_PAYLOAD))
    payload.update(overrides)
    return CampaignDraft.model_validate(payload)


class FakeMessage:
    def __init__(self, content):
        self.content = content


class FakeChoice:
    def __init__(self, content):
        self.message = FakeMessage(content)


class FakeCompletions:
    def __init__(self, content=None, error=None, choices=True):
        self.content = content
        self.error = error
        self.choices = choices
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if not self.choices:
            return SimpleNamespace(choices=[])
        return SimpleNamespace(choices=[FakeChoice(self.content)])


class FakeGroq:
    """Stands in for groq.Groq; only chat.completions.create is used."""

    def __init__(self, content=None, error=None, choices=True):
        self.completions = FakeCompletions(content=content, error=error, choices=choices)
        self.chat = SimpleNamespace(completions=self.completions)


class FakeGenerationClient:
    """Generation client double for orchestrator and API tests."""

    def __init__(self, draft=None, error=None):
        self.draft = draft or make_draft()
        self.error = error
        self.prompts = []

    def generate(self, prompt: str) -> CampaignDraft:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.draft


def transport_failure() -> GenerationError:
    return GenerationError("transport", "connection reset by peer")
