def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json["status"] == "healthy"
    assert resp.json["database"]["status"] == "healthy"


def test_cors_headers_for_allowed_origin(app, client):
    app.config["CORS_ORIGINS"] = ["http://shop.example"]
    resp = client.get("/products", headers={"Origin": "http://shop.example"})
    assert resp.headers["Access-Control-Allow-Origin"] == "http://shop.example"

    resp = client.get("/products", headers={"Origin": "http://evil.example"})
    assert "Access-Control-Allow-Origin" not in resp.headers


def test_unknown_method_gets_json_body(client):
    resp = client.put("/products")
    assert resp.status_code == 405
    assert resp.json["code"] == "method_not_allowed"
    assert resp.json["message"] == "Method Not Allowed"


def test_testing_apps_are_not_held_for_exit_disposal(app):
    import storefront

    with app.app_context():
        from storefront.extensions import db
        assert db.engine not in storefront._engines_to_dispose
