"""
adsflow/models/campaign.py

CampaignDraft: one generated Google Ads Search campaign.

Field names on the wire are camelCase (finalUrl, displayPath1, ...).
Phrase and exact keywords are always stored as bare terms; quotes and
brackets are added only when a draft is rendered for export.
"""

from typing import List
from pydantic import BaseModel, ConfigDict, Field


class KeywordSet(BaseModel):
    """The same keyword set in three match-type syntaxes."""
    model_config = ConfigDict(frozen=True)

    broad: List[str]
    phrase: List[str]
    exact: List[str]


class Sitelink(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    description1: str
    description2: str


class CampaignDraft(BaseModel):
    """
    Generated campaign draft, held client-side for the session.

    Every list is a fixed-size ordered collection once generated: edits
    replace the text at an index, never add, remove or reorder elements.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    final_url: str = Field(alias="finalUrl")
    display_path1: str = Field(alias="displayPath1")
    display_path2: str = Field(alias="displayPath2")
    headlines: List[str]
    descriptions: List[str]
    company_name: str = Field(alias="companyName")
    keywords: KeywordSet
    sitelinks: List[Sitelink]
    callouts: List[str]
    structured_snippets: List[str] = Field(alias="structuredSnippets")
    negative_keywords: List[str] = Field(alias="negativeKeywords")

    def to_wire(self) -> dict:
        """Serialize with the camelCase field names used by the browser client."""
        return self.model_dump(by_alias=True, mode="json")
