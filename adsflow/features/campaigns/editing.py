"""
In-place edits of a generated draft.

A path addresses exactly one string in the draft, using the wire
(camelCase) field names:

    ["finalUrl"]
    ["headlines", 3]
    ["keywords", "phrase", 1]
    ["sitelinks", 0, "description2"]

Lists keep their size and order; only the addressed text changes.
"""

import re
from typing import List, Union

from adsflow.core.errors import ValidationError
from adsflow.models.campaign import CampaignDraft

PathPart = Union[str, int]

SCALAR_FIELDS = {"finalUrl", "displayPath1", "displayPath2", "companyName"}
LIST_FIELDS = {"headlines", "descriptions", "callouts", "structuredSnippets", "negativeKeywords"}
KEYWORD_MATCH_TYPES = {"broad", "phrase", "exact"}
SITELINK_FIELDS = {"text", "description1", "description2"}

# Google Ads character limits per wire field; fields not listed are unbounded
MAX_LENGTHS = {
    "displayPath1": 15,
    "displayPath2": 15,
    "headlines": 30,
    "descriptions": 90,
    "callouts": 25,
    "structuredSnippets": 25,
}
SITELINK_MAX_LENGTHS = {"text": 25, "description1": 35, "description2": 35}

_QUOTES = re.compile(r'"')
_BRACKETS = re.compile(r"[\[\]]")


def strip_phrase(term: str) -> str:
    return _QUOTES.sub("", term)


def strip_exact(term: str) -> str:
    return _BRACKETS.sub("", term)


def _check_length(value: str, limit, label: str) -> None:
    if limit is not None and len(value) > limit:
        raise ValidationError(f"{label} must be at most {limit} characters")


def _index(items: list, part: PathPart, label: str) -> int:
    # bool is an int subclass; reject it explicitly
    if not isinstance(part, int) or isinstance(part, bool):
        raise ValidationError(f"{label} needs a numeric index")
    if part < 0 or part >= len(items):
        raise ValidationError(f"{label} has no item at index {part}")
    return part


def apply_edit(draft: CampaignDraft, path: List[PathPart], value: str) -> CampaignDraft:
    """
    Return a copy of ``draft`` with the string at ``path`` replaced.

    Raises:
        ValidationError: Unknown field, wrong depth, index out of range,
            or text over the field's Google Ads character limit
    """
    if not path:
        raise ValidationError("Edit path is empty")

    data = draft.to_wire()
    head = path[0]

    if head in SCALAR_FIELDS:
        if len(path) != 1:
            raise ValidationError(f"{head} is a single value")
        _check_length(value, MAX_LENGTHS.get(head), head)
        data[head] = value

    elif head in LIST_FIELDS:
        if len(path) != 2:
            raise ValidationError(f"{head} edits need exactly one index")
        _check_length(value, MAX_LENGTHS.get(head), head)
        items = data[head]
        items[_index(items, path[1], head)] = value

    elif head == "keywords":
        if len(path) != 3 or path[1] not in KEYWORD_MATCH_TYPES:
            raise ValidationError("keyword edits look like ['keywords', <broad|phrase|exact>, <index>]")
        match_type = path[1]
        items = data["keywords"][match_type]
        if match_type == "phrase":
            value = strip_phrase(value)
        elif match_type == "exact":
            value = strip_exact(value)
        items[_index(items, path[2], f"keywords.{match_type}")] = value

    elif head == "sitelinks":
        if len(path) != 3 or path[2] not in SITELINK_FIELDS:
            raise ValidationError("sitelink edits look like ['sitelinks', <index>, <text|description1|description2>]")
        _check_length(value, SITELINK_MAX_LENGTHS[path[2]], f"sitelinks.{path[2]}")
        items = data["sitelinks"]
        items[_index(items, path[1], "sitelinks")][path[2]] = value

    else:
        raise ValidationError(f"Unknown campaign field: {head}")

    return CampaignDraft.model_validate(data)
