from fastapi.testclient import TestClient

from growth_engine.api import app

client = TestClient(app)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_root_lists_endpoints():
    body = client.get("/").json()
    assert body["endpoints"]["dashboard"] == "POST /dashboard"


def test_defaults_and_levers():
    defaults = client.get("/defaults").json()
    assert defaults["assumptions"]["churn_rate"] == 5
    assert defaults["fields"]["activation_rate"]["min"] == 10

    levers = client.get("/levers").json()["levers"]
    assert [lv["id"] for lv in levers] == ["churn", "arpu", "activation"]
    assert [lv["target"] for lv in levers] == [2, 9, 60]


def test_projection_defaults():
    r = client.post("/projection", json={})
    assert r.status_code == 200
    body = r.json()
    assert [p["month"] for p in body["baseline"]] == [0, 3, 6, 9, 12, 15, 18]
    assert body["baseline"][4]["mrr"] == 841635
    assert body["projected"] == body["baseline"]


def test_projection_with_overrides_and_custom_months():
    r = client.post("/projection", json={
        "overrides": {"churn": 2, "arpu": 9, "activation": 60},
        "months": [12],
    })
    body = r.json()
    assert body["projected"] == [
        {"month": 12, "customers": body["projected"][0]["customers"], "mrr": 1848472}
    ]


def test_impact():
    r = client.post("/impact", json={"lever_id": "churn", "value": 2})
    assert r.status_code == 200
    assert r.json() == {"lever_id": "churn", "value": 2.0, "impact": 16}


def test_impact_clamps_value_to_lever_range():
    r = client.post("/impact", json={"lever_id": "arpu", "value": 100})
    assert r.json()["value"] == 20


def test_impact_unknown_lever_is_404():
    r = client.post("/impact", json={"lever_id": "pricing", "value": 3})
    assert r.status_code == 404


def test_impact_missing_value_is_422():
    r = client.post("/impact", json={"lever_id": "churn"})
    assert r.status_code == 422


def test_dashboard():
    r = client.post("/dashboard", json={"overrides": {"churn": 3, "arpu": 7, "activation": 45}})
    assert r.status_code == 200
    body = r.json()
    assert body["insight"]["template"] == "retention_monetization"
    assert body["headline"]["is_modified"] is True
    assert len(body["plan"]) == 3


def test_dashboard_clamps_assumptions():
    r = client.post("/dashboard", json={"assumptions": {"activation_rate": 0, "customers": 15}})
    body = r.json()
    assert body["headline"]["assumptions_edited"] is True
    cards = {c["lever"]: c for c in body["levers"]}
    assert cards["activation"]["baseline"] == 10


def test_defaults_groups_fields():
    groups = client.get("/defaults").json()["groups"]
    assert groups["business"] == ["customers", "arpu", "churn_rate", "activation_rate"]
    assert len(groups["funnel"]) == 5


def _post_raw(path, body):
    # NaN is not valid JSON; send the literal token the way a lax client would
    return client.post(path, content=body, headers={"content-type": "application/json"})


def test_dashboard_rejects_nan_assumption():
    r = _post_raw("/dashboard", '{"assumptions": {"arpu": NaN}}')
    assert r.status_code == 422
    assert r.json()["detail"][0]["loc"] == ["body", "assumptions", "arpu"]


def test_dashboard_rejects_nan_override():
    r = _post_raw("/dashboard", '{"overrides": {"churn": NaN}}')
    assert r.status_code == 422


def test_impact_rejects_non_finite_value():
    assert _post_raw("/impact", '{"lever_id": "churn", "value": NaN}').status_code == 422
    assert _post_raw("/impact", '{"lever_id": "arpu", "value": Infinity}').status_code == 422


def test_projection_rejects_months_outside_horizon():
    assert client.post("/projection", json={"months": [12, 61]}).status_code == 422
    assert client.post("/projection", json={"months": [-1]}).status_code == 422
    r = client.post("/projection", json={"months": [60]})
    assert r.status_code == 200
