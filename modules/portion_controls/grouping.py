"""
Pure data-shaping helpers for recipes.

Nothing here touches the database: callers pass rows (ORM instances or any
object exposing the same attributes) and get schema objects back.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Set

from modules.portion_controls import schemas

UNCATEGORIZED_KEY = "uncategorized"


def recipe_key(product_id: int, variant_id: Optional[int]) -> str:
    """Identity of a recipe target: the variant when set, otherwise the base product."""
    if variant_id is not None:
        return f"variant-{variant_id}"
    return f"product-{product_id}"


def existing_recipe_keys(recipes: Iterable) -> Set[str]:
    return {recipe_key(r.product_id, r.variant_id) for r in recipes}


def find_addons_category_id(categories: Iterable, addons_name: str) -> Optional[int]:
    wanted = addons_name.strip().lower()
    for category in categories:
        if category.name.strip().lower() == wanted:
            return category.id
    return None


def _variants_by_product(variants: Iterable) -> Dict[int, list]:
    grouped: Dict[int, list] = {}
    for variant in variants:
        grouped.setdefault(variant.product_id, []).append(variant)
    return grouped


def _eligible_products(products: Iterable, addons_category_id: Optional[int]) -> list:
    return [
        p for p in products if p.is_active and (addons_category_id is None or p.category_id != addons_category_id)
    ]


def build_recipe_targets(
    products: Sequence,
    variants: Sequence,
    taken: Set[str],
    addons_category_id: Optional[int] = None,
) -> List[schemas.RecipeTarget]:
    """
    Expand active products into the targets that may still get a recipe.

    A product without variants yields itself unless it already has a recipe.
    A product with variants yields one target per variant without a recipe
    and never the base product.
    """
    variants_by_product = _variants_by_product(variants)
    targets: List[schemas.RecipeTarget] = []
    for product in _eligible_products(products, addons_category_id):
        product_variants = variants_by_product.get(product.id, [])
        if not product_variants:
            key = recipe_key(product.id, None)
            if key not in taken:
                targets.append(
                    schemas.RecipeTarget(
                        id=key,
                        name=product.name,
                        product_id=product.id,
                        product_name=product.name,
                        variant_id=None,
                        has_variants=False,
                    )
                )
            continue
        for variant in product_variants:
            key = recipe_key(product.id, variant.id)
            if key in taken:
                continue
            targets.append(
                schemas.RecipeTarget(
                    id=key,
                    name=f"{product.name} - {variant.name}",
                    product_id=product.id,
                    product_name=product.name,
                    variant_id=variant.id,
                    has_variants=True,
                )
            )
    return targets


def build_grouped_targets(
    products: Sequence,
    variants: Sequence,
    taken: Set[str],
    addons_category_id: Optional[int] = None,
) -> List[schemas.GroupedRecipeTarget]:
    """Same selection as build_recipe_targets, one entry per product with its free variants."""
    variants_by_product = _variants_by_product(variants)
    grouped: List[schemas.GroupedRecipeTarget] = []
    for product in _eligible_products(products, addons_category_id):
        product_variants = variants_by_product.get(product.id, [])
        available = [v for v in product_variants if recipe_key(product.id, v.id) not in taken]
        base_free = not product_variants and recipe_key(product.id, None) not in taken
        if not base_free and not available:
            continue
        category = getattr(product, "category", None)
        grouped.append(
            schemas.GroupedRecipeTarget(
                product_id=product.id,
                product_name=product.name,
                category_name=category.name if category is not None else None,
                has_variants=bool(product_variants),
                variants=[
                    schemas.RecipeTargetVariant(id=recipe_key(product.id, v.id), variant_id=v.id, name=v.name)
                    for v in available
                ],
            )
        )
    return grouped


def group_by_category(
    recipes: Iterable[schemas.PortionControlSummary], uncategorized_label: str = "Uncategorized"
) -> List[schemas.PortionControlGroup]:
    """Bucket recipes by their product's category; buckets sorted by name."""
    groups: Dict[str, schemas.PortionControlGroup] = {}
    for recipe in recipes:
        if recipe.category_id is not None:
            key = str(recipe.category_id)
            name = recipe.category_name or uncategorized_label
        else:
            key = UNCATEGORIZED_KEY
            name = uncategorized_label
        if key not in groups:
            groups[key] = schemas.PortionControlGroup(key=key, category_id=recipe.category_id, name=name)
        groups[key].recipes.append(recipe)
    return sorted(groups.values(), key=lambda g: g.name.lower())
