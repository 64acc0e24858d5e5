"""API tests for products, variants, cloning and the menu view."""


def variant_payload(name, sku=None, options=None, price=150.0):
    return {"name": name, "sku": sku, "price": price, "options": options or []}


def test_create_product_with_variants_and_options(client, make_category, make_product):
    coffee = make_category("Coffee")
    created = make_product(
        "Latte",
        coffee["id"],
        sku="LAT",
        variants=[variant_payload("Large", "LAT-L", [{"name": "Size", "value": "16oz"}])],
    )
    assert created["category_name"] == "Coffee"
    assert created["variants_count"] == 1
    assert created["variants"][0]["options"][0]["value"] == "16oz"


def test_unknown_category_is_not_found(client):
    resp = client.post("/products", json={"name": "Latte", "category_id": 42})
    assert resp.status_code == 404


def test_list_filters_and_counts(client, make_category, make_product):
    coffee = make_category("Coffee")
    tea = make_category("Tea")
    make_product("Mocha", coffee["id"], variants=[variant_payload("S"), variant_payload("L")])
    make_product("Chai", tea["id"])

    rows = client.get("/products").json()
    assert [p["name"] for p in rows] == ["Chai", "Mocha"]
    assert rows[1]["variants_count"] == 2
    only_coffee = client.get("/products", params={"category_id": coffee["id"]}).json()
    assert [p["name"] for p in only_coffee] == ["Mocha"]


def test_update_replaces_variants(client, make_category, make_product):
    coffee = make_category("Coffee")
    created = make_product("Mocha", coffee["id"], variants=[variant_payload("S"), variant_payload("L")])
    payload = {
        "name": "Mocha",
        "category_id": coffee["id"],
        "price": 130,
        "variants": [variant_payload("Regular")],
    }
    resp = client.put(f"/products/{created['id']}", json=payload)
    assert resp.status_code == 200, resp.text
    assert [v["name"] for v in resp.json()["variants"]] == ["Regular"]


def test_clone_product_clears_product_sku(client, make_category, make_product):
    coffee = make_category("Coffee")
    source = make_product("Latte", coffee["id"], sku="LAT", variants=[variant_payload("Large", "LAT-L")])

    resp = client.post(f"/products/{source['id']}/clone")
    assert resp.status_code == 200
    clone = resp.json()
    assert clone["id"] != source["id"]
    assert clone["name"] == "Latte (Copy)"
    assert clone["sku"] is None
    assert [v["name"] for v in clone["variants"]] == ["Large"]


def test_clone_variant_within_product(client, make_category, make_product):
    coffee = make_category("Coffee")
    source = make_product(
        "Latte", coffee["id"], variants=[variant_payload("Large", "LAT-L", [{"name": "Size", "value": "16oz"}])]
    )
    variant_id = source["variants"][0]["id"]

    resp = client.post(f"/products/{source['id']}/variants/{variant_id}/clone")
    assert resp.status_code == 200
    variants = resp.json()["variants"]
    assert [v["name"] for v in variants] == ["Large", "Large (Copy)"]
    assert variants[1]["sku"] is None
    assert variants[1]["options"][0]["value"] == "16oz"


def test_clone_unknown_variant_is_404(client, make_category, make_product):
    coffee = make_category("Coffee")
    source = make_product("Latte", coffee["id"])
    assert client.post(f"/products/{source['id']}/variants/999/clone").status_code == 404


def test_menu_groups_active_products(client, make_category, make_product):
    tea = make_category("Tea")
    coffee = make_category("Coffee")
    make_product("Latte", coffee["id"])
    chai = make_product("Chai", tea["id"])
    hidden = make_product("Old Brew", coffee["id"])
    client.patch(f"/products/{hidden['id']}/status", json={"is_active": False})

    menu = client.get("/menu").json()
    assert [c["name"] for c in menu] == ["Coffee", "Tea"]
    assert [p["name"] for p in menu[0]["products"]] == ["Latte"]
    assert menu[1]["products"][0]["id"] == chai["id"]


def test_delete_product_removes_recipes(client, make_category, make_product):
    coffee = make_category("Coffee")
    latte = make_product("Latte", coffee["id"])
    client.post(
        "/portion-controls",
        json={"product_id": latte["id"], "name": "Latte", "items": [{"ingredient_name": "Milk", "quantity": 1}]},
    )
    assert client.delete(f"/products/{latte['id']}").status_code == 204
    assert client.get("/portion-controls").json() == []
