"""Tests for the public portfolio page."""
import pytest


@pytest.mark.api
def test_public_portfolio(client, auth_headers, user):
    client.post("/api/projects", headers=auth_headers, json={"title": "Site"})
    client.post("/api/skills", headers=auth_headers, json={"name": "Go", "proficiency": 4})

    response = client.get(f"/portfolio/{user.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["found"] is True
    assert body["profile"]["full_name"] == "Ada Lovelace"
    assert [p["title"] for p in body["projects"]] == ["Site"]
    assert [s["name"] for s in body["skills"]] == ["Go"]


@pytest.mark.api
def test_unknown_portfolio(client):
    response = client.get("/portfolio/does-not-exist")

    assert response.status_code == 200
    assert response.json() == {
        "found": False,
        "title": "Portfolio Not Found",
        "message": "The requested portfolio does not exist or is not available.",
    }
