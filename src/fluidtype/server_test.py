import httpx

BODY_MODEL = {
    "base_rem_px": 16,
    "breakpoints": [
        {"id": "min", "label": "375", "value": 375},
        {"id": "mid", "label": "1024", "value": 1024},
        {"id": "max", "label": "1440", "value": 1440},
    ],
    "tokens": [
        {
            "id": "body1",
            "name": "body",
            "sizes": {"min": 16, "mid": 18, "max": 20},
            "lh": {"min": 1.4, "mid": 1.4, "max": 1.4},
        }
    ],
}


def put_body_model(server):
    response = httpx.put(f"{server}/api/model", json=BODY_MODEL)
    assert response.status_code == 200
    return response.json()


# ##################################################################
# test server health endpoint
# verifies the health endpoint responds with ok status
def test_server_health_endpoint(server):
    response = httpx.get(f"{server}/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# ##################################################################
# test model replace and read back
# verifies the session model round-trips through put and get
def test_put_and_get_model(server):
    stored = put_body_model(server)
    assert stored["tokens"][0]["grow_factor_lg"] == 1
    response = httpx.get(f"{server}/api/model")
    assert response.status_code == 200
    assert response.json() == stored


# ##################################################################
# test invalid model rejected
# verifies pydantic validation guards the session model
def test_put_invalid_model(server):
    put_body_model(server)
    response = httpx.put(f"{server}/api/model", json={"base_rem_px": -1})
    assert response.status_code == 422
    assert httpx.get(f"{server}/api/model").json()["base_rem_px"] == 16


# ##################################################################
# test zero size rejected
# verifies a zero size is a validation error instead of a server failure
def test_zero_size_rejected(server):
    stored = put_body_model(server)
    zero = dict(BODY_MODEL, tokens=[dict(BODY_MODEL["tokens"][0], sizes={"min": 0, "mid": 18, "max": 20},
                                         lh={"min": 24, "mid": 24, "max": 28})])
    assert httpx.put(f"{server}/api/model", json=zero).status_code == 422
    assert httpx.post(f"{server}/api/generate", json=zero).status_code == 422
    assert httpx.get(f"{server}/api/model").json() == stored
    assert httpx.get(f"{server}/").status_code == 200
    assert httpx.get(f"{server}/api/preview", params={"width": 800}).status_code == 200


# ##################################################################
# test generate from session model
# verifies the properties and mixins text for the session model
def test_generate_session_model(server):
    put_body_model(server)
    response = httpx.post(f"{server}/api/generate")
    assert response.status_code == 200
    data = response.json()
    assert "--body: 1.25rem;" in data["properties"]
    assert "--body: calc(1.25rem + (0.004808 * (100vw - 90rem) * 1));" in data["properties"]
    assert "@define-mixin font-body {" in data["mixins"]


# ##################################################################
# test generate posted model
# verifies a posted model is compiled without touching the session model
def test_generate_posted_model(server):
    put_body_model(server)
    posted = dict(BODY_MODEL, tokens=[dict(BODY_MODEL["tokens"][0], name="lead")])
    response = httpx.post(f"{server}/api/generate", json=posted)
    assert response.status_code == 200
    assert "--lead: 1.25rem;" in response.json()["properties"]
    assert httpx.get(f"{server}/api/model").json()["tokens"][0]["name"] == "body"


# ##################################################################
# test generate invalid model
# verifies precondition failures surface as 400 with a message
def test_generate_without_tokens(server):
    response = httpx.post(f"{server}/api/generate", json={"tokens": []})
    assert response.status_code == 400
    assert "no tokens" in response.json()["detail"]


# ##################################################################
# test import applies to session model
# verifies generated css imports back and replaces the session tokens
def test_import_applies(server):
    put_body_model(server)
    properties = httpx.post(f"{server}/api/generate").json()["properties"]
    httpx.put(f"{server}/api/model", json=dict(BODY_MODEL, tokens=[]))

    response = httpx.post(f"{server}/api/import", json={"css": properties})
    assert response.status_code == 200
    data = response.json()
    assert data["applied"] is True
    assert data["tokens"][0]["sizes"] == {"min": 16, "mid": 18, "max": 20}
    assert [bp["value"] for bp in data["breakpoints"]] == [375, 1024, 1440]

    model = httpx.get(f"{server}/api/model").json()
    assert [t["name"] for t in model["tokens"]] == ["body"]


# ##################################################################
# test import dry run
# verifies apply=false returns tokens without changing the session model
def test_import_without_apply(server):
    put_body_model(server)
    response = httpx.post(f"{server}/api/import", json={"css": ":root { --x: 2rem; }", "apply": False})
    assert response.status_code == 200
    assert response.json()["tokens"][0]["sizes"]["max"] == 32
    assert response.json()["breakpoints"] is None
    assert httpx.get(f"{server}/api/model").json()["tokens"][0]["name"] == "body"


# ##################################################################
# test malformed import
# verifies a failed import leaves the session model untouched
def test_import_malformed_keeps_model(server):
    stored = put_body_model(server)
    response = httpx.post(f"{server}/api/import", json={"css": "body { color: red; }"})
    assert response.status_code == 400
    assert ":root" in response.json()["detail"]
    assert httpx.get(f"{server}/api/model").json() == stored


# ##################################################################
# test token and breakpoint editing
# verifies add and remove endpoints mutate the session model
def test_edit_tokens_and_breakpoints(server):
    put_body_model(server)
    token = httpx.post(f"{server}/api/model/tokens", json={"name": "h1"}).json()
    assert token["sizes"] == {"min": 16, "mid": 16, "max": 16}

    bp = httpx.post(f"{server}/api/model/breakpoints", json={"value": 768, "id": "tablet"}).json()
    assert bp == {"id": "tablet", "label": "768", "value": 768}
    duplicate = httpx.post(f"{server}/api/model/breakpoints", json={"value": 800, "id": "tablet"})
    assert duplicate.status_code == 400

    model = httpx.get(f"{server}/api/model").json()
    assert all(t["sizes"]["tablet"] == 16 for t in model["tokens"])

    assert httpx.delete(f"{server}/api/model/breakpoints/tablet").status_code == 200
    assert httpx.delete(f"{server}/api/model/breakpoints/tablet").status_code == 404
    assert httpx.delete(f"{server}/api/model/tokens/{token['id']}").status_code == 200
    assert httpx.delete(f"{server}/api/model/tokens/{token['id']}").status_code == 404

    model = httpx.get(f"{server}/api/model").json()
    assert [t["name"] for t in model["tokens"]] == ["body"]


# ##################################################################
# test preview endpoint
# verifies computed sizes at the calibration widths
def test_preview(server):
    put_body_model(server)
    for width, expected in ((375, 16), (1024, 18), (1440, 20), (1856, 22)):
        response = httpx.get(f"{server}/api/preview", params={"width": width})
        assert response.status_code == 200
        body = response.json()["tokens"][0]
        assert body["name"] == "body"
        assert abs(body["font_size_px"] - expected) < 0.01
        assert body["line_height"] == 1.4


# ##################################################################
# test editor page
# verifies the root page embeds generated css and a sample per token
def test_editor_page(server):
    put_body_model(server)
    response = httpx.get(f"{server}/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "--body: clamp(1rem, 0.927774rem + 0.308166vw, 1.125rem);" in response.text
    assert 'data-token="body"' in response.text
    assert "@define-mixin font-body {" in response.text
