"""API tests for categories."""


def test_create_and_list_categories(client, make_category):
    make_category("Tea")
    make_category("Coffee", "Hot drinks")
    rows = client.get("/categories").json()
    assert [c["name"] for c in rows] == ["Coffee", "Tea"]
    assert rows[0]["description"] == "Hot drinks"
    assert all(c["is_active"] for c in rows)


def test_toggle_status_and_active_filter(client, make_category):
    tea = make_category("Tea")
    make_category("Coffee")
    resp = client.patch(f"/categories/{tea['id']}/status", json={"is_active": False})
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False
    assert [c["name"] for c in client.get("/categories", params={"active_only": True}).json()] == ["Coffee"]


def test_update_category(client, make_category):
    tea = make_category("Tea")
    resp = client.put(f"/categories/{tea['id']}", json={"name": "Teas", "description": "Loose leaf"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Teas"
    assert resp.json()["updated_at"] is not None


def test_name_length_is_validated(client):
    resp = client.post("/categories", json={"name": "A"})
    assert resp.status_code == 422
    assert resp.json()["code"] == "validation_error"


def test_missing_category_is_404(client):
    resp = client.get("/categories/404")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Category not found", "code": "not_found"}


def test_delete_unused_category(client, make_category):
    tea = make_category("Tea")
    assert client.delete(f"/categories/{tea['id']}").status_code == 204
    assert client.get(f"/categories/{tea['id']}").status_code == 404


def test_delete_referenced_category_is_rejected(client, make_category, make_product):
    coffee = make_category("Coffee")
    make_product("Latte", coffee["id"])

    resp = client.delete(f"/categories/{coffee['id']}")
    assert resp.status_code == 409
    assert resp.json()["message"].startswith("Category is still used by products")
    assert client.get(f"/categories/{coffee['id']}").status_code == 200
