from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from page_mdx.config import AppConfig, ConversionConfig, RuntimeConfig


@pytest.fixture()
def client(tmp_path: Path) -> TestClient:
    config = AppConfig(
        conversion=ConversionConfig(preserve_links=True, max_depth=20),
        runtime=RuntimeConfig(output_dir=tmp_path, enable_local_api=True, max_file_size_mb=1),
    )
    return TestClient(create_app(config))


def test_create_app_requires_enabled_api(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError):
        create_app(AppConfig(runtime=RuntimeConfig(output_dir=tmp_path)))


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_convert_page_payload(client: TestClient) -> None:
    response = client.post(
        "/convert",
        json={
            "html": "<p><a href='/docs'>Docs</a></p>",
            "title": "Tab",
            "url": "https://example.com",
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["markdown"] == "[Docs](/docs)\n"
    assert body["title"] == "Tab"
    assert body["source"] == "https://example.com"


def test_convert_page_options_override_defaults(client: TestClient) -> None:
    response = client.post(
        "/convert",
        json={"html": "<p><a href='/docs'>Docs</a></p>", "options": {"preserve_links": False}},
    )
    assert response.json()["markdown"] == "Docs\n"


def test_convert_page_depth_limit(client: TestClient) -> None:
    html = "<div>" * 30 + "x" + "</div>" * 30
    response = client.post("/convert", json={"html": html})
    assert response.status_code == 422
    assert response.json()["detail"] == "DEPTH_LIMIT"


def test_convert_upload(client: TestClient) -> None:
    response = client.post(
        "/convert/file",
        files={"file": ("page.html", b"<h2>Up</h2>", "text/html")},
        data={"include_metadata": "false"},
    )
    assert response.status_code == 200
    assert response.json()["markdown"] == "## Up\n"


def test_convert_upload_rejects_other_types(client: TestClient) -> None:
    response = client.post("/convert/file", files={"file": ("notes.txt", b"x", "text/plain")})
    assert response.status_code == 415


def test_convert_upload_size_limit(client: TestClient) -> None:
    payload = b"<p>" + b"a" * (1024 * 1024) + b"</p>"
    response = client.post("/convert/file", files={"file": ("big.html", payload, "text/html")})
    assert response.status_code == 413
