from fastapi.testclient import TestClient

from jsonprovider.json_config import JsonConfig
from jsonprovider.log_config import is_listening
from jsonprovider.properties import MarshallerProperties as MP


def test_fastapi_roundtrip(fastapi_app, caplog):
    caplog.set_level("DEBUG")
    with TestClient(fastapi_app) as client:
        resp = client.post("/items/", json={"name": "pen", "price": 1.5})
        assert resp.status_code == 201
        assert resp.headers["content-type"].startswith("application/json")
        assert resp.content == b'{"name":"pen","price":1.5,"tags":[]}'

        resp = client.get("/items/pen")
        assert resp.status_code == 200
        assert resp.json() == {"name": "pen", "price": 1.5, "tags": []}

    assert "JSON provider ready: 2 marshaller, 0 unmarshaller" in caplog.text


def test_contextual_override_applies_per_request(fastapi_app, registry):
    with TestClient(fastapi_app) as client:
        client.post("/items/", json={"name": "pen", "price": 1.5})

        override = JsonConfig().set_formatted_output(True)
        override.marshaller_property(MP.SORT_KEYS, True)
        registry.register_context_resolver(
            JsonConfig, "application/json", override.resolver()
        )
        resp = client.get("/items/pen")
        assert resp.text == (
            '{\n  "name": "pen",\n  "price": 1.5,\n  "tags": []\n}'
        )


def test_scalars_bypass_the_provider(fastapi_app):
    with TestClient(fastapi_app) as client:
        client.post("/items/", json={"name": "pen", "price": 1.5})
        resp = client.get("/items/pen/price")
        assert resp.status_code == 200
        assert resp.json() == 1.5

        # the provider does not read bare scalar bodies
        resp = client.post("/words/", json="hello")
        assert resp.status_code == 415


def test_malformed_body_is_400(fastapi_app):
    with TestClient(fastapi_app) as client:
        resp = client.post(
            "/items/",
            content=b"{broken",
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400

        resp = client.post("/items/", json={"name": "pen"})
        assert resp.status_code == 400


def test_wrong_media_type_is_415(fastapi_app):
    with TestClient(fastapi_app) as client:
        resp = client.post(
            "/items/",
            content=b"name=pen",
            headers={"content-type": "text/plain"},
        )
        assert resp.status_code == 415


def test_rejected_configuration_is_500(fastapi_app, registry):
    registry.register_context_resolver(
        JsonConfig,
        "application/json",
        JsonConfig(marshaller_properties={"no.such.option": 1}).resolver(),
    )
    with TestClient(fastapi_app, raise_server_exceptions=False) as client:
        resp = client.post("/items/", json={"name": "pen", "price": 1.5})
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal Server Error"}


def test_bad_request_charset_is_415(fastapi_app, caplog):
    with TestClient(fastapi_app) as client:
        for charset in ("base64", "nope"):
            resp = client.post(
                "/items/",
                content=b'{"name": "pen", "price": 1.5}',
                headers={
                    "content-type": f"application/json; charset={charset}"
                },
            )
            assert resp.status_code == 415
    assert "Provider misconfigured" not in caplog.text


def test_lifespan_stops_log_listener(fastapi_app):
    with TestClient(fastapi_app):
        assert is_listening()
    assert not is_listening()
