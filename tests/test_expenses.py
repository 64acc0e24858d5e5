"""API tests for expenses."""


def expense_payload(transaction_date="2025-03-10", items=None, remarks=None):
    return {
        "transaction_date": transaction_date,
        "remarks": remarks,
        "items": items or [{"item_name": "Milk", "cost": 120.5}, {"item_name": "Cups", "cost": 80}],
    }


def test_totals_derive_from_items(client):
    resp = client.post("/expenses", json=expense_payload(remarks="Weekly restock"))
    assert resp.status_code == 200, resp.text
    expense = resp.json()
    assert expense["total_expense"] == 200.5
    assert expense["items_count"] == 2
    assert [i["item_name"] for i in expense["items"]] == ["Milk", "Cups"]


def test_items_are_required_and_positive(client):
    assert client.post("/expenses", json={"transaction_date": "2025-03-10", "items": []}).status_code == 422
    bad = expense_payload(items=[{"item_name": "Milk", "cost": 0}])
    assert client.post("/expenses", json=bad).status_code == 422


def test_update_replaces_items(client):
    created = client.post("/expenses", json=expense_payload()).json()
    resp = client.put(f"/expenses/{created['id']}", json=expense_payload(items=[{"item_name": "Beans", "cost": 900}]))
    assert resp.status_code == 200
    assert resp.json()["total_expense"] == 900.0
    assert resp.json()["items_count"] == 1
    assert len(resp.json()["items"]) == 1


def test_date_filters_and_order(client):
    client.post("/expenses", json=expense_payload("2025-03-01"))
    client.post("/expenses", json=expense_payload("2025-03-15"))
    client.post("/expenses", json=expense_payload("2025-04-02"))

    dates = lambda params: [e["transaction_date"] for e in client.get("/expenses", params=params).json()]
    assert dates({}) == ["2025-04-02", "2025-03-15", "2025-03-01"]
    assert dates({"date_from": "2025-03-10", "date_to": "2025-03-31"}) == ["2025-03-15"]


def test_delete_expense(client):
    created = client.post("/expenses", json=expense_payload()).json()
    assert client.delete(f"/expenses/{created['id']}").status_code == 204
    assert client.get(f"/expenses/{created['id']}").status_code == 404
