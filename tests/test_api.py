from fastapi.testclient import TestClient

from typology_assist.main import app

client = TestClient(app)

META = {
    "country": "IN",
    "domain": "psp",
    "product": "wallet",
    "customerType": "individual",
    "amountBand": "high",
    "volumeBand": "high",
    "crossBorder": "Yes",
}


def test_health():
    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["typologies_loaded"] is True
    assert body["count"] > 0


def test_typologies_listing():
    res = client.get("/typologies")
    assert res.status_code == 200
    assert all("name" in r for r in res.json())


def test_analyse_returns_result_and_prose():
    res = client.post("/analyse", json={"meta": META, "scenario": "Funds from a mule wallet moved via multiple banks"})
    assert res.status_code == 200
    body = res.json()
    result = body["result"]
    assert 1 <= len(result["likely_typologies"]) <= 3
    assert result["priority_assessment"]["level"] == "High"
    assert result["meta"]["crossBorder"] == "Yes"
    assert body["narrative"].startswith("The scenario describes potentially unusual activity in India")
    assert body["filing_paragraph"].startswith("This report relates to")


def test_analyse_rejects_blank_scenario():
    res = client.post("/analyse", json={"meta": META, "scenario": "   "})
    assert res.status_code == 422


def test_card_is_plain_text():
    res = client.post("/card", json={"meta": META, "scenario": "mule wallet"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/plain")
    assert res.text.startswith("Likely typologies:\n")


def test_form_roundtrip():
    res = client.post("/analyze", data={"scenario": "mule wallet", "country": "IN", "domain": "psp", "product": "wallet"})
    assert res.status_code == 200
    assert "Draft STR / SAR paragraph" in res.text


def test_form_blank_scenario_shows_error():
    res = client.post("/analyze", data={"scenario": " "})
    assert res.status_code == 200
    assert "Please enter a brief scenario description." in res.text


def test_form_keeps_selected_bands():
    res = client.post("/analyze", data={"scenario": "mule wallet", "amount_band": "high", "volume_band": "medium"})
    assert res.status_code == 200
    assert '<option value="high" selected>high</option>' in res.text
    assert '<option value="medium" selected>medium</option>' in res.text
    assert '<option value="low" selected>' not in res.text
