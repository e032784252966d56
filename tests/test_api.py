def test_rewrite_success(client, provider_calls) -> None:
    response = client.post("/api/rewrite", json={"notes": "canaux calcifiés", "patientName": "Jean Dupont"})
    assert response.status_code == 200
    assert response.json() == {"output": "Rapport formel..."}
    assert len(provider_calls) == 1


def test_rewrite_missing_key_returns_500(client, monkeypatch, provider_calls) -> None:
    monkeypatch.delenv("GEMINI_API_KEY")
    response = client.post("/api/rewrite", json={"notes": "canaux calcifiés", "patientName": "Jean Dupont"})
    assert response.status_code == 500
    assert response.json() == {"error": "API Key missing"}
    assert len(provider_calls) == 0


def test_rewrite_provider_failure_returns_fixed_message(client, failing_provider) -> None:
    response = client.post("/api/rewrite", json={"notes": "canaux calcifiés", "patientName": "Jean Dupont"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate report"}
    assert "secret-detail" not in response.text


def test_rewrite_malformed_body_stays_500(client, provider_calls) -> None:
    response = client.post("/api/rewrite", json={"notes": ["not", "a", "string"]})
    assert response.status_code == 500
    assert "error" in response.json()
    assert len(provider_calls) == 0


def test_render_preview(client) -> None:
    response = client.post("/api/render", json={
        "referringDoctor": "Tremblay",
        "patientName": "Jean Dupont",
        "tooth": "46",
        "procedureType": "surgery",
        "clinicalNotes": "Patient anxieux",
    })
    assert response.status_code == 200
    data = response.json()
    assert "Une microchirurgie endodontique a été réalisée sur la dent 46." in data["body"]
    assert data["body"] in data["letter"]
    assert "Notes Cliniques :\nPatient anxieux" in data["letter"]
    assert "À l'attention du Dr Tremblay" in data["letter"]


def test_render_uses_configured_practitioner(client, monkeypatch) -> None:
    monkeypatch.setenv("PRACTITIONER_NAME", "Dr. Gagnon")
    response = client.post("/api/render", json={})
    assert response.json()["letter"].endswith("Cordialement,\n\nDr. Gagnon")


def test_render_rejects_unknown_procedure(client) -> None:
    response = client.post("/api/render", json={"procedureType": "implant"})
    assert response.status_code == 422


def test_procedures_catalogue(client) -> None:
    response = client.get("/api/procedures")
    assert response.status_code == 200
    data = response.json()
    assert data["default"] == "root-canal-treatment"
    assert [p["key"] for p in data["procedures"]] == [
        "consultation", "root-canal-treatment", "retreatment", "surgery"
    ]


def test_health(client) -> None:
    response = client.get("/api/health")
    assert response.json() == {"status": "ok", "provider": "gemini", "model": "gemini-1.5-flash"}


def test_index_page(client) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert "Générateur de Rapports Endo" in response.text


def test_render_splits_content_and_closing(client) -> None:
    response = client.post("/api/render", json={"patientName": "Jean Dupont", "clinicalNotes": "MB2 trouvé"})
    data = response.json()
    assert data["letter"] == f"{data['content']}\n\n{data['closing']}"
    assert data["content"].endswith("pour la restauration finale.")
    assert data["closing"].startswith("Si vous avez des questions")


def test_index_page_places_xrays_before_closing(client) -> None:
    page = client.get("/").text
    assert page.index('id="letter"') < page.index('id="xrays"') < page.index('id="closing"')


def test_rewrite_ignores_unparseable_timeout(client, monkeypatch, provider_calls, caplog) -> None:
    monkeypatch.setenv("REWRITE_TIMEOUT_SECONDS", "30s")
    response = client.post("/api/rewrite", json={"notes": "x", "patientName": "y"})
    assert response.status_code == 200
    assert response.json() == {"output": "Rapport formel..."}
    assert "Ignoring REWRITE_TIMEOUT_SECONDS='30s'" in caplog.text


def test_rewrite_settings_failure_returns_json_error(client, monkeypatch, provider_calls) -> None:
    def broken_settings():
        raise ValueError("bad configuration")

    monkeypatch.setattr("llm.get_settings", broken_settings)
    response = client.post("/api/rewrite", json={"notes": "x", "patientName": "y"})
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"error": "Failed to generate report"}
    assert len(provider_calls) == 0


def test_index_page_ignores_stale_previews(client) -> None:
    page = client.get("/").text
    assert "const seq = ++renderSeq;" in page
    assert "if (seq !== renderSeq) return;" in page
