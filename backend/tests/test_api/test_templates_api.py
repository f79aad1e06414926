"""Tests for template listing, upload and removal."""

from __future__ import annotations

import asyncio

from roastbot.api import templates as templates_api
from roastbot.meme.processing import process_image


def _upload(client, image_data, name="My Cat"):
    return client.post("/api/templates", json={
        "name": name,
        "type": "custom",
        "tags": ["cat"],
        "boxCount": 2,
        "captions": ["top", "bottom"],
        "imageData": image_data,
    })


def test_list_all(client):
    data = client.get("/api/templates").json()
    assert data["count"] == 7
    drake = next(t for t in data["templates"] if t["id"] == "drake")
    assert drake["available"] is True
    assert drake["boxCount"] == 1
    doge = next(t for t in data["templates"] if t["id"] == "doge")
    assert doge["available"] is False


def test_filter_by_type_and_search(client):
    roast = client.get("/api/templates", params={"type": "roast"}).json()
    assert {t["id"] for t in roast["templates"]} == {"skeptical", "drake", "distracted", "disaster-girl"}

    found = client.get("/api/templates", params={"type": "compliment", "search": "animal"}).json()
    assert {t["id"] for t in found["templates"]} == {"doge", "wholesome"}


def test_invalid_type_filter(client):
    response = client.get("/api/templates", params={"type": "insult"})
    assert response.status_code == 400


def test_upload_then_delete(client, catalog, image_factory, to_data_url):
    response = _upload(client, to_data_url(image_factory(1600, 1200, fmt="JPEG"), "image/jpeg"))
    assert response.status_code == 200
    template = response.json()["template"]
    assert template["custom"] is True
    assert template["theme"] == "custom"
    assert (template["width"], template["height"]) == (800, 600)
    assert template["filename"].endswith("-my-cat.jpg")
    assert template["available"] is True
    assert (catalog.custom_dir / template["filename"]).is_file()

    listed = client.get("/api/templates", params={"theme": "custom"}).json()
    assert [t["id"] for t in listed["templates"]] == [template["id"]]

    meme = client.post("/api/generate-meme", json={"text": "hi", "type": "roast", "template": template["id"]})
    assert meme.status_code == 200

    deleted = client.delete(f"/api/templates/{template['id']}")
    assert deleted.json() == {"success": True, "id": template["id"]}
    assert not (catalog.custom_dir / template["filename"]).exists()
    assert client.get("/api/templates").json()["count"] == 7


def test_upload_too_small(client, image_factory, to_data_url):
    response = _upload(client, to_data_url(image_factory(150, 150)))
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Image dimensions too small. Minimum 200px required.",
    }


def test_upload_requires_data_url(client):
    response = _upload(client, "https://example.com/cat.jpg")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request data"


def test_builtin_template_cannot_be_deleted(client):
    response = client.delete("/api/templates/drake")
    assert response.status_code == 404
    assert response.json()["error"] == "Template not found"


def test_upload_processing_runs_off_the_event_loop(client, monkeypatch, image_factory, to_data_url):
    on_loop = []

    def recording_process_image(*args, **kwargs):
        try:
            asyncio.get_running_loop()
            on_loop.append(True)
        except RuntimeError:
            on_loop.append(False)
        return process_image(*args, **kwargs)

    monkeypatch.setattr(templates_api, "process_image", recording_process_image)
    response = _upload(client, to_data_url(image_factory(400, 300, fmt="JPEG"), "image/jpeg"))
    assert response.status_code == 200
    assert on_loop == [False]
