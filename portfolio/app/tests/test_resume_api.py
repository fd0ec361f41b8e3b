"""Tests for resume preview and export."""
import pytest


@pytest.fixture
def seeded(client, auth_headers):
    client.post("/api/skills", headers=auth_headers, json={"name": "Go", "proficiency": 4})
    return auth_headers


@pytest.mark.api
def test_preview(client, seeded):
    response = client.post("/api/resume/preview", headers=seeded, json={})

    assert response.status_code == 200
    body = response.json()
    assert body["sections"] == ["header", "contact", "skills"]
    assert "Go (4/5)" in body["document"]
    assert body["filename"] == "ada-lovelace.html"


@pytest.mark.api
def test_preview_with_draft(client, seeded):
    response = client.post("/api/resume/preview", headers=seeded, json={
        "objective": "Backend engineer",
        "work_experience": [{"company": "Acme", "position": "Engineer", "start_date": "2021"}],
        "education": [{}],
    })

    body = response.json()
    assert body["sections"] == ["header", "contact", "summary", "skills", "work_experience"]
    assert "Engineer at Acme" in body["document"]


@pytest.mark.api
def test_preview_rejects_partial_rows(client, seeded):
    response = client.post("/api/resume/preview", headers=seeded, json={
        "education": [{"school": "MIT"}],
    })

    assert response.status_code == 422
    assert response.json()["errors"] == {"education.0.degree": "Degree must be at least 2 characters"}


@pytest.mark.api
def test_export(client, seeded):
    response = client.post("/api/resume/export", headers=seeded, json={"objective": "Hello"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers["content-disposition"] == 'attachment; filename="ada-lovelace.html"'
    assert response.text.startswith("<!DOCTYPE html>")


@pytest.mark.api
def test_resume_requires_session(client):
    assert client.post("/api/resume/preview", json={}).status_code == 401
