import pytest
from fastapi.testclient import TestClient

from models import CaseRecord


@pytest.fixture(autouse=True)
def provider_env(monkeypatch):
    """Gemini with a dummy key unless a test says otherwise."""
    monkeypatch.setenv("REWRITE_PROVIDER", "gemini")
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.delenv("REWRITE_MODEL", raising=False)
    monkeypatch.delenv("REWRITE_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv("PRACTITIONER_NAME", raising=False)


@pytest.fixture
def provider_calls(monkeypatch):
    """Replace the provider call with a double returning a canned report."""
    calls = []

    def fake_call_llm(prompt, provider, model_id, api_key):
        calls.append({"prompt": prompt, "provider": provider, "model_id": model_id, "api_key": api_key})
        return "Rapport formel..."

    monkeypatch.setattr("llm.call_llm", fake_call_llm)
    return calls


@pytest.fixture
def failing_provider(monkeypatch):
    calls = []

    def fake_call_llm(prompt, provider, model_id, api_key):
        calls.append(prompt)
        raise RuntimeError("503 upstream overloaded, key=secret-detail")

    monkeypatch.setattr("llm.call_llm", fake_call_llm)
    return calls


@pytest.fixture
def record():
    return CaseRecord(
        referringDoctor="Tremblay",
        patientName="Jean Dupont",
        patientDOB="1980-04-12",
        tooth="36",
        clinicalNotes="canaux calcifiés",
    )


@pytest.fixture
def client():
    from index import app
    return TestClient(app)
