from datetime import datetime, timezone

import pytest
from bs4 import BeautifulSoup
from fastapi.testclient import TestClient

from auditoiso.config import settings
from auditoiso.db import init_db
from auditoiso.main import app
from auditoiso.schemas.audit import Audit
from auditoiso.services.pdf_generator import PdfGenerator

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATA_DIR", str(tmp_path))
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_EMAIL", "admin@example.com")
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_PASSWORD", "password")
    monkeypatch.setattr(settings, "SCORE_MISMATCH_POLICY", "warn")
    monkeypatch.setattr(settings, "REPORT_OWNER_CHECK", False)
    return tmp_path


@pytest.fixture
def database(data_dir):
    return init_db(str(data_dir))


@pytest.fixture
def client(data_dir):
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def login(client, email="admin@example.com", password="password") -> dict:
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def auth_headers(client):
    return login(client)


@pytest.fixture
def generator():
    return PdfGenerator(clock=lambda: FIXED_NOW, tz=timezone.utc)


@pytest.fixture
def q1_audit():
    return Audit.model_validate({
        "id": "a-q1",
        "name": "Q1 Review",
        "standard": "ISO 9001",
        "checklist": [
            {"id": "9001-1", "text": "Existe un proceso documentado", "weight": 3, "passed": True}
        ],
        "score": {"totalAchieved": 3, "totalPossible": 3, "percent": 100},
        "notes": "",
        "auditor": "Jane",
        "createdAtAudit": "2026-03-01T09:30:00Z",
        "createdAt": "2026-03-01T09:31:00.000Z",
        "createdBy": "u-1",
    })


def visible_lines(html: str) -> list:
    """Text a reader sees in the rendered report, one entry per line."""
    soup = BeautifulSoup(html, "html.parser")
    return soup.body.get_text("\n", strip=True).splitlines()
