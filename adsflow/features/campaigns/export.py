"""Export service: render a campaign draft as TXT or CSV.

Match-type decoration (quotes for phrase, brackets for exact) is applied
here and nowhere else.
"""

import csv
import io
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from adsflow.features.campaigns.editing import strip_exact, strip_phrase
from adsflow.models.campaign import CampaignDraft

ExportFormat = Literal["txt", "csv"]

DEFAULT_SITELINK_BASE_URL = "https://example.com"
CSV_HEADER = ["Asset Type", "Value 1", "Value 2", "Value 3"]
UTF8_BOM = "\ufeff"


class ExportResult(BaseModel):
    """Rendered export and download metadata."""
    model_config = ConfigDict(frozen=True)

    format: str
    filename: str
    content_type: str
    content: str


def decorate_phrase(term: str) -> str:
    return f'"{strip_phrase(term)}"'


def decorate_exact(term: str) -> str:
    return f"[{strip_exact(term)}]"


def sitelink_url(base_url: Optional[str], index: int) -> str:
    """Base URL without query, fragment or trailing slash, plus sitelink UTM tags."""
    clean = (base_url or DEFAULT_SITELINK_BASE_URL).strip()
    clean = clean.split("?", 1)[0].split("#", 1)[0]
    if clean.endswith("/"):
        clean = clean[:-1]
    return f"{clean}/?utm_source=google-ads&utm_campaign=sitelink&utm_content=0{index + 1}"


def negative_keywords_line(draft: CampaignDraft) -> str:
    return ", ".join(f"-{kw}" for kw in draft.negative_keywords)


def _bullets(items: List[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


class ExportService:
    """Service for rendering drafts into downloadable files."""

    def export_draft(
        self,
        draft: CampaignDraft,
        export_format: ExportFormat,
        sitelink_base_url: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ExportResult:
        base_url = sitelink_base_url or draft.final_url or DEFAULT_SITELINK_BASE_URL
        stem = f"google_ads_campaign_{(today or date.today()).isoformat()}"

        if export_format == "txt":
            return ExportResult(
                format="txt",
                filename=f"{stem}.txt",
                content_type="text/plain; charset=utf-8",
                content=self.render_txt(draft, base_url),
            )
        return ExportResult(
            format="csv",
            filename=f"{stem}.csv",
            content_type="text/csv; charset=utf-8",
            content=self.render_csv(draft, base_url),
        )

    def render_txt(self, draft: CampaignDraft, base_url: str) -> str:
        kw = draft.keywords
        sitelinks = "\n\n".join(
            f"- {s.text}\n  - {s.description1}\n  - {s.description2}\n  - {sitelink_url(base_url, i)}"
            for i, s in enumerate(draft.sitelinks)
        )
        sections = [
            "GOOGLE ADS CAMPAIGN STRUCTURE\n=============================",
            (
                f"Final URL: {draft.final_url}\n"
                f"Display Path: /{draft.display_path1}/{draft.display_path2}\n"
                f"Company Name: {draft.company_name}"
            ),
            f"Headlines:\n{_bullets(draft.headlines)}",
            f"Descriptions:\n{_bullets(draft.descriptions)}",
            f"Keywords (Broad):\n{_bullets(kw.broad)}",
            f"Keywords (Phrase):\n{_bullets([decorate_phrase(k) for k in kw.phrase])}",
            f"Keywords (Exact):\n{_bullets([decorate_exact(k) for k in kw.exact])}",
            f"Sitelinks:\n{sitelinks}",
            f"Callouts:\n{_bullets(draft.callouts)}",
            f"Structured Snippets:\n{_bullets(draft.structured_snippets)}",
            f"Negative Keywords:\n{_bullets(draft.negative_keywords)}",
        ]
        return "\n\n".join(sections)

    def render_csv(self, draft: CampaignDraft, base_url: str) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)

        for h in draft.headlines:
            writer.writerow(["Headline", h])
        for d in draft.descriptions:
            writer.writerow(["Description", d])
        for k in draft.keywords.broad:
            writer.writerow(["Keyword (Broad)", k])
        for k in draft.keywords.phrase:
            writer.writerow(["Keyword (Phrase)", decorate_phrase(k)])
        for k in draft.keywords.exact:
            writer.writerow(["Keyword (Exact)", decorate_exact(k)])
        for i, s in enumerate(draft.sitelinks):
            writer.writerow(["Sitelink", s.text, f"{s.description1} | {s.description2}", sitelink_url(base_url, i)])
        for c in draft.callouts:
            writer.writerow(["Callout", c])
        for s in draft.structured_snippets:
            writer.writerow(["Structured Snippet", s])
        for n in draft.negative_keywords:
            writer.writerow(["Negative Keyword", n])

        return UTF8_BOM + buffer.getvalue()


# Singleton service instance
export_service = ExportService()
