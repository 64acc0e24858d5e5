"""API tests for recipes: uniqueness, item replacement and target enumeration."""
import pytest

from modules.portion_controls import models, service


def recipe_payload(product_id, variant_id=None, name="Latte recipe", items=None):
    return {
        "product_id": product_id,
        "variant_id": variant_id,
        "name": name,
        "serving_size": "1 cup",
        "items": items
        or [
            {"ingredient_name": "Espresso", "quantity": 18, "unit": "g"},
            {"ingredient_name": "Milk", "quantity": 200, "unit": "ml"},
        ],
    }


@pytest.fixture
def latte(make_category, make_product):
    coffee = make_category("Coffee")
    return make_product("Latte", coffee["id"])


@pytest.fixture
def sized_latte(make_category, make_product):
    coffee = make_category("Coffee")
    return make_product(
        "Iced Latte",
        coffee["id"],
        variants=[{"name": "Small", "price": 110}, {"name": "Large", "price": 150}],
    )


def test_create_recipe_for_base_product(client, latte):
    resp = client.post("/portion-controls", json=recipe_payload(latte["id"]))
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["product_name"] == "Latte"
    assert body["variant_id"] is None
    assert [i["ingredient_name"] for i in body["items"]] == ["Espresso", "Milk"]
    assert body["items_count"] == 2


def test_second_base_recipe_is_rejected(client, latte):
    assert client.post("/portion-controls", json=recipe_payload(latte["id"])).status_code == 200

    resp = client.post("/portion-controls", json=recipe_payload(latte["id"], name="Another latte"))
    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "conflict"
    assert "this product." in body["message"]
    assert "update the existing recipe" in body["message"]


def test_variant_recipes_are_independent(client, sized_latte):
    small, large = sized_latte["variants"]
    assert client.post("/portion-controls", json=recipe_payload(sized_latte["id"], small["id"])).status_code == 200
    assert client.post("/portion-controls", json=recipe_payload(sized_latte["id"], large["id"])).status_code == 200

    resp = client.post("/portion-controls", json=recipe_payload(sized_latte["id"], large["id"], name="Dup"))
    assert resp.status_code == 409
    assert "this product variant" in resp.json()["message"]


def test_variant_of_other_product_is_rejected(client, latte, sized_latte):
    foreign_variant = sized_latte["variants"][0]["id"]
    resp = client.post("/portion-controls", json=recipe_payload(latte["id"], foreign_variant))
    assert resp.status_code == 422


def test_unknown_product_is_not_found(client):
    resp = client.post("/portion-controls", json=recipe_payload(999))
    assert resp.status_code == 404
    assert resp.json()["message"] == "Product not found"


def test_recipe_requires_items(client, latte):
    payload = recipe_payload(latte["id"])
    payload["items"] = []
    assert client.post("/portion-controls", json=payload).status_code == 422


def test_storage_constraint_catches_race(client, latte, monkeypatch):
    assert client.post("/portion-controls", json=recipe_payload(latte["id"])).status_code == 200
    # Simulate a second writer that passed the pre-check before the first insert landed
    monkeypatch.setattr(service, "recipe_exists", lambda *args: False)

    resp = client.post("/portion-controls", json=recipe_payload(latte["id"], name="Racing latte"))
    assert resp.status_code == 409
    assert "this product." in resp.json()["message"]
    assert len(client.get("/portion-controls").json()) == 1


def test_variant_race_is_caught_by_unique_constraint(client, sized_latte, monkeypatch):
    large = sized_latte["variants"][1]["id"]
    assert client.post("/portion-controls", json=recipe_payload(sized_latte["id"], large)).status_code == 200
    monkeypatch.setattr(service, "recipe_exists", lambda *args: False)

    resp = client.post("/portion-controls", json=recipe_payload(sized_latte["id"], large, name="Racing"))
    assert resp.status_code == 409
    assert "this product variant" in resp.json()["message"]


def test_failed_items_leave_no_recipe_behind(client, latte, db_session):
    payload = recipe_payload(
        latte["id"], items=[{"ingredient_product_id": 9999, "ingredient_name": "Ghost", "quantity": 1}]
    )
    resp = client.post("/portion-controls", json=payload)
    assert resp.status_code == 422
    assert db_session.query(models.PortionControl).count() == 0
    # The product is free for a recipe again
    assert client.post("/portion-controls", json=recipe_payload(latte["id"])).status_code == 200


def test_update_replaces_items(client, latte):
    created = client.post("/portion-controls", json=recipe_payload(latte["id"])).json()
    payload = recipe_payload(
        latte["id"], name="Latte v2", items=[{"ingredient_name": "Oat milk", "quantity": 180, "unit": "ml"}]
    )
    resp = client.put(f"/portion-controls/{created['id']}", json=payload)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["name"] == "Latte v2"
    assert [i["ingredient_name"] for i in body["items"]] == ["Oat milk"]

    fetched = client.get(f"/portion-controls/{created['id']}").json()
    assert len(fetched["items"]) == 1


def test_update_keeping_target_skips_duplicate_check(client, latte):
    created = client.post("/portion-controls", json=recipe_payload(latte["id"])).json()
    resp = client.put(f"/portion-controls/{created['id']}", json=recipe_payload(latte["id"], name="Renamed"))
    assert resp.status_code == 200


def test_update_to_taken_target_is_rejected(client, sized_latte):
    small, large = sized_latte["variants"]
    client.post("/portion-controls", json=recipe_payload(sized_latte["id"], small["id"]))
    other = client.post("/portion-controls", json=recipe_payload(sized_latte["id"], large["id"])).json()

    resp = client.put(f"/portion-controls/{other['id']}", json=recipe_payload(sized_latte["id"], small["id"]))
    assert resp.status_code == 409
    assert resp.json()["message"].endswith("Please choose a different product/variant.")


def test_update_race_is_caught_by_unique_constraint(client, sized_latte, monkeypatch):
    small, large = sized_latte["variants"]
    client.post("/portion-controls", json=recipe_payload(sized_latte["id"], small["id"]))
    other = client.post("/portion-controls", json=recipe_payload(sized_latte["id"], large["id"])).json()
    monkeypatch.setattr(service, "recipe_exists", lambda *args: False)

    resp = client.put(f"/portion-controls/{other['id']}", json=recipe_payload(sized_latte["id"], small["id"]))
    assert resp.status_code == 409
    assert "this product variant" in resp.json()["message"]

    fetched = client.get(f"/portion-controls/{other['id']}").json()
    assert fetched["variant_id"] == large["id"]
    assert [i["ingredient_name"] for i in fetched["items"]] == ["Espresso", "Milk"]


def test_failed_item_update_keeps_original_items(client, latte):
    created = client.post("/portion-controls", json=recipe_payload(latte["id"])).json()
    payload = recipe_payload(
        latte["id"],
        name="Broken",
        items=[{"ingredient_product_id": 9999, "ingredient_name": "Ghost", "quantity": 1}],
    )
    resp = client.put(f"/portion-controls/{created['id']}", json=payload)
    assert resp.status_code == 422

    fetched = client.get(f"/portion-controls/{created['id']}").json()
    assert fetched["name"] == "Latte recipe"
    assert [i["ingredient_name"] for i in fetched["items"]] == ["Espresso", "Milk"]


def test_base_recipe_for_product_with_variants_is_rejected(client, sized_latte):
    resp = client.post("/portion-controls", json=recipe_payload(sized_latte["id"]))
    assert resp.status_code == 422
    assert "choose a variant" in resp.json()["message"]

    small = sized_latte["variants"][0]["id"]
    created = client.post("/portion-controls", json=recipe_payload(sized_latte["id"], small)).json()
    resp = client.put(f"/portion-controls/{created['id']}", json=recipe_payload(sized_latte["id"]))
    assert resp.status_code == 422
    assert client.get(f"/portion-controls/{created['id']}").json()["variant_id"] == small


def test_delete_recipe_cascades_items(client, latte, db_session):
    created = client.post("/portion-controls", json=recipe_payload(latte["id"])).json()
    assert client.delete(f"/portion-controls/{created['id']}").status_code == 204
    assert client.get(f"/portion-controls/{created['id']}").status_code == 404
    assert db_session.query(models.PortionControlItem).count() == 0


def test_list_reports_item_counts(client, latte):
    client.post("/portion-controls", json=recipe_payload(latte["id"]))
    rows = client.get("/portion-controls").json()
    assert len(rows) == 1
    assert rows[0]["items_count"] == 2
    assert rows[0]["category_name"] == "Coffee"


def test_latte_scenario(client, make_category, make_product):
    coffee = make_category("Coffee")
    plain = make_product("Latte", coffee["id"])
    sized = make_product("Latte Sized", coffee["id"], variants=[{"name": "Large"}])

    assert client.post("/portion-controls", json=recipe_payload(plain["id"])).status_code == 200
    second = client.post("/portion-controls", json=recipe_payload(plain["id"]))
    assert second.status_code == 409
    assert "this product." in second.json()["message"]
    large = sized["variants"][0]["id"]
    assert client.post("/portion-controls", json=recipe_payload(sized["id"], large)).status_code == 200


def test_targets_skip_addons_and_taken(client, make_category, make_product):
    coffee = make_category("Coffee")
    addons = make_category("Add-ons")
    latte = make_product("Latte", coffee["id"])
    mocha = make_product("Mocha", coffee["id"], variants=[{"name": "Small"}, {"name": "Large"}])
    make_product("Napkin", addons["id"])

    client.post("/portion-controls", json=recipe_payload(latte["id"]))
    client.post("/portion-controls", json=recipe_payload(mocha["id"], mocha["variants"][0]["id"]))

    targets = client.get("/portion-controls/targets").json()
    assert [t["name"] for t in targets] == ["Mocha - Large"]
    assert all(t["product_name"] != "Napkin" for t in targets)

    grouped = client.get("/portion-controls/targets/grouped").json()
    assert len(grouped) == 1
    assert grouped[0]["category_name"] == "Coffee"
    assert [v["name"] for v in grouped[0]["variants"]] == ["Large"]


def test_inactive_products_are_not_targets(client, latte):
    client.patch(f"/products/{latte['id']}/status", json={"is_active": False})
    assert client.get("/portion-controls/targets").json() == []


def test_by_category_groups(client, make_category, make_product):
    tea = make_category("Tea")
    coffee = make_category("Coffee")
    latte = make_product("Latte", coffee["id"])
    chai = make_product("Chai", tea["id"])
    client.post("/portion-controls", json=recipe_payload(chai["id"], name="Chai recipe"))
    client.post("/portion-controls", json=recipe_payload(latte["id"]))

    groups = client.get("/portion-controls/by-category").json()
    assert [g["name"] for g in groups] == ["Coffee", "Tea"]
    assert [r["name"] for r in groups[1]["recipes"]] == ["Chai recipe"]
