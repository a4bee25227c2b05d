"""
HTTP tests for the edit and export endpoints.
"""

from adsflow.features.campaigns.export import UTF8_BOM
from adsflow.tests.mocks import CAMPAIGN_PAYLOAD


def test_edit_requires_auth(client):
    response = client.post(
        "/v1/campaigns/edit",
        json={"campaign": CAMPAIGN_PAYLOAD, "path": ["headlines", 0], "value": "New"},
    )
    assert response.status_code == 401


def test_edit_returns_updated_draft(client, auth_header):
    response = client.post(
        "/v1/campaigns/edit",
        json={"campaign": CAMPAIGN_PAYLOAD, "path": ["keywords", "exact", 0], "value": "[cake shop]"},
        headers=auth_header(),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["keywords"]["exact"][0] == "cake shop"
    assert body["request_id"] == response.headers["x-request-id"]


def test_edit_invalid_path_is_400(client, auth_header):
    response = client.post(
        "/v1/campaigns/edit",
        json={"campaign": CAMPAIGN_PAYLOAD, "path": ["headlines", 40], "value": "x"},
        headers=auth_header(),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_export_csv(client, auth_header):
    response = client.post(
        "/v1/campaigns/export",
        json={"campaign": CAMPAIGN_PAYLOAD, "format": "csv", "sitelinkBaseUrl": "https://bakery.example.com"},
        headers=auth_header(),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["format"] == "csv"
    assert data["filename"].endswith(".csv")
    assert data["content"].startswith(UTF8_BOM)


def test_export_unknown_format_is_400(client, auth_header):
    response = client.post(
        "/v1/campaigns/export",
        json={"campaign": CAMPAIGN_PAYLOAD, "format": "pdf"},
        headers=auth_header(),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_edit_over_character_limit_is_400(client, auth_header):
    response = client.post(
        "/v1/campaigns/edit",
        json={"campaign": CAMPAIGN_PAYLOAD, "path": ["headlines", 0], "value": "x" * 31},
        headers=auth_header(),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "validation_error"
    assert "30" in body["error"]
