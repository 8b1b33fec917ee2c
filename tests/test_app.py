from fastapi.testclient import TestClient

from conftest import API
from nudge_api.app.main import create_app


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "OK", "message": "Event API is running"}


def test_unknown_route_is_endpoint_not_found(client):
    for path in ("/nope", f"{API}/unknown", "/api/v2/app/events"):
        response = client.get(path)
        assert response.status_code == 404
        assert response.json() == {"error": "Endpoint not found"}


def test_cors_allows_any_origin(client):
    response = client.get("/health", headers={"Origin": "http://example.com"})
    assert response.headers["access-control-allow-origin"] == "*"

    preflight = client.options(
        f"{API}/events",
        headers={
            "Origin": "http://example.com",
            "Access-Control-Request-Method": "PUT",
        },
    )
    assert preflight.status_code == 200
    assert "PUT" in preflight.headers["access-control-allow-methods"]


def test_index_page_and_assets(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "/static/app.js" in response.text

    assert client.get("/static/app.js").status_code == 200
    assert client.get("/static/style.css").status_code == 200


def test_unhandled_error_is_generic_500(mongo_client, app_settings, caplog):
    app = create_app(app_settings)

    @app.get("/boom")
    def boom():
        raise RuntimeError("secret detail")

    with TestClient(app) as test_client:
        response = test_client.get("/boom", headers={"Origin": "http://example.com"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert "secret detail" not in response.text
    assert response.headers["access-control-allow-origin"] == "*"
    assert "Unhandled error on GET /boom" in caplog.text


def test_database_outage_is_reported(client):
    client.app.state.connection.close()

    response = client.get(f"{API}/events")
    assert response.status_code == 503
    assert response.json() == {"error": "Database not connected"}
