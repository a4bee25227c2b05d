"""Campaign API: quota-gated generation, in-place edits and export.

Generation returns the bare CampaignDraft document. Edit and export are
stateless: the browser sends the draft it holds and gets a new draft or a
rendered file back.
"""

from typing import List, Literal, Optional, Union

from fastapi import APIRouter, Body, Depends, Header, Request, Response
from pydantic import BaseModel, ConfigDict, Field

from adsflow.core.auth import require_identity
from adsflow.core.logging import get_request_id
from adsflow.features.campaigns.editing import apply_edit
from adsflow.features.campaigns.export import export_service
from adsflow.features.generation.orchestrator import GenerationOrchestrator, get_generation_orchestrator
from adsflow.models.campaign import CampaignDraft
from adsflow.models.profile import Identity

router = APIRouter(prefix="/v1/campaigns", tags=["campaigns"])


class GenerateCampaignRequest(BaseModel):
    # Optional so an absent prompt is reported as missing_prompt, not a schema error
    prompt: Optional[str] = None


class EditCampaignRequest(BaseModel):
    campaign: CampaignDraft
    path: List[Union[int, str]]
    value: str


class ExportCampaignRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    campaign: CampaignDraft
    format: Literal["txt", "csv"] = "txt"
    sitelink_base_url: Optional[str] = Field(default=None, alias="sitelinkBaseUrl")


@router.post("/generate", response_model=CampaignDraft)
def generate_campaign(
    request: Request,
    response: Response,
    body: Optional[GenerateCampaignRequest] = Body(default=None),
    authorization: Optional[str] = Header(None),
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator),
):
    """Generate a campaign draft for the caller's business description.

    The credential is passed through unresolved: the orchestrator checks
    the prompt before it authenticates.
    """
    rid = getattr(request.state, "request_id", None) or get_request_id()
    outcome = orchestrator.run(
        body.prompt if body else None,
        authorization,
        request_id=rid,
    )
    response.headers["x-generations-used"] = str(outcome.usage)
    return outcome.draft


@router.post("/edit")
def edit_campaign(
    body: EditCampaignRequest,
    request: Request,
    identity: Identity = Depends(require_identity),
):
    """Replace one text value in a draft, keeping list sizes and order."""
    rid = getattr(request.state, "request_id", None) or get_request_id()
    updated = apply_edit(body.campaign, body.path, body.value)
    return {"data": updated.to_wire(), "request_id": rid}


@router.post("/export")
def export_campaign(
    body: ExportCampaignRequest,
    request: Request,
    identity: Identity = Depends(require_identity),
):
    """Render a draft as TXT or CSV.

    Response includes:
    - filename: suggested download filename
    - content_type: MIME type
    - content: full export content
    """
    rid = getattr(request.state, "request_id", None) or get_request_id()
    result = export_service.export_draft(
        body.campaign,
        body.format,
        sitelink_base_url=body.sitelink_base_url,
    )
    return {"data": result.model_dump(), "request_id": rid}
