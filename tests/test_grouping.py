"""Pure tests for recipe keys, target enumeration and category grouping."""
from types import SimpleNamespace

from modules.portion_controls import grouping
from modules.portion_controls.schemas import PortionControlSummary


def product(id, name, category_id=None, is_active=True):
    return SimpleNamespace(id=id, name=name, category_id=category_id, is_active=is_active, category=None)


def variant(id, product_id, name):
    return SimpleNamespace(id=id, product_id=product_id, name=name)


def summary(id, name, category_id=None, category_name=None):
    return PortionControlSummary(
        id=id, product_id=id, name=name, category_id=category_id, category_name=category_name
    )


def test_recipe_key_prefers_variant():
    assert grouping.recipe_key(3, None) == "product-3"
    assert grouping.recipe_key(3, 7) == "variant-7"


def test_find_addons_category_is_case_insensitive():
    categories = [SimpleNamespace(id=1, name="Coffee"), SimpleNamespace(id=2, name=" Add-Ons ")]
    assert grouping.find_addons_category_id(categories, "add-ons") == 2
    assert grouping.find_addons_category_id(categories, "extras") is None


def test_product_with_variants_never_yields_base():
    products = [product(1, "Latte", 10)]
    variants = [variant(11, 1, "Small"), variant(12, 1, "Large")]
    targets = grouping.build_recipe_targets(products, variants, taken=set())
    assert [t.id for t in targets] == ["variant-11", "variant-12"]
    assert all(t.has_variants for t in targets)


def test_taken_targets_are_skipped():
    products = [product(1, "Latte"), product(2, "Mocha")]
    variants = [variant(21, 2, "Small"), variant(22, 2, "Large")]
    taken = {"product-1", "variant-21"}
    targets = grouping.build_recipe_targets(products, variants, taken)
    assert [t.name for t in targets] == ["Mocha - Large"]


def test_addons_and_inactive_products_are_excluded():
    products = [product(1, "Napkin", 5), product(2, "Latte", 10), product(3, "Old", 10, is_active=False)]
    targets = grouping.build_recipe_targets(products, [], set(), addons_category_id=5)
    assert [t.name for t in targets] == ["Latte"]


def test_grouped_targets_drop_fully_taken_products():
    products = [product(1, "Latte"), product(2, "Mocha")]
    variants = [variant(21, 2, "Small")]
    grouped = grouping.build_grouped_targets(products, variants, taken={"variant-21"})
    assert [g.product_name for g in grouped] == ["Latte"]
    assert grouped[0].variants == []


def test_group_by_category_buckets_and_sorts():
    recipes = [
        summary(1, "Latte", 2, "coffee"),
        summary(2, "Chai", 1, "Tea"),
        summary(3, "Water"),
        summary(4, "Mocha", 2, "coffee"),
    ]
    groups = grouping.group_by_category(recipes, "Uncategorized")
    assert [g.name for g in groups] == ["coffee", "Tea", "Uncategorized"]
    assert [r.name for r in groups[0].recipes] == ["Latte", "Mocha"]
    assert groups[2].key == grouping.UNCATEGORIZED_KEY
    assert sum(len(g.recipes) for g in groups) == len(recipes)


def test_group_by_category_empty():
    assert grouping.group_by_category([]) == []
