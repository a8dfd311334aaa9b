from fastapi.testclient import TestClient


REQUIRED_ROUTES = {
    "/api/orders",
    "/api/orders/track/{order_id}",
    "/api/orders/{id}",
    "/api/payment/verify-payment",
    "/health",
}


def test_api_startup_and_router_registration(monkeypatch):
    from food_orders import main

    monkeypatch.setattr(main, "_startup_tasks", lambda: None)

    with TestClient(main.app) as client:
        response = client.get("/")
        health_response = client.get("/health")
        openapi_response = client.get("/openapi.json")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert health_response.json() == {"status": "healthy"}
    assert openapi_response.status_code == 200
    assert response.headers["X-Request-ID"]

    paths = set(main.app.openapi()["paths"])
    assert REQUIRED_ROUTES.issubset(paths)


def test_request_id_header_is_propagated(monkeypatch):
    from food_orders import main

    monkeypatch.setattr(main, "_startup_tasks", lambda: None)

    with TestClient(main.app) as client:
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"
