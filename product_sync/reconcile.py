# reconcile.py
"""
Decide how a freshly scraped product should be written over its stored row.

Rules are checked in order and the first match wins:

1. no stored row                      -> NewProduct (announced by the caller once inserted)
2. ingredient list changed            -> PriceChanged
3. stored categories not canonical    -> InfoChanged
4. descriptive fields drifted         -> InfoChanged
5. otherwise                          -> AlreadyUpToDate
"""
from typing import Callable, List, NamedTuple, Optional

from . import change_log
from .categories import has_invalid_categories
from .schema import Product, ProductResponse, UpsertResponse

# Fields compared by the info-drift rule. `category` is compared joined.
INFO_FIELDS = ("sourceSite", "size", "unitPrice", "unitName", "originalUnitQuantity")


class Rule(NamedTuple):
    name: str
    matches: Callable[[Product, Product], bool]
    apply: Callable[[Product, Product], ProductResponse]


def ingredients_differ(scraped: Product, stored: Product) -> bool:
    # list equality is positional, so a reordered list counts as changed
    return scraped.ingredients != stored.ingredients


def _joined(categories: Optional[List[str]]) -> str:
    return " ".join(categories or [])


def info_differs(scraped: Product, stored: Product) -> bool:
    if _joined(scraped.category) != _joined(stored.category):
        return True
    return any(getattr(scraped, f) != getattr(stored, f) for f in INFO_FIELDS)


def _keep_last_updated(scraped: Product, stored: Product) -> Product:
    return scraped.model_copy(update={"lastUpdated": stored.lastUpdated})


# --- rule predicates ---

def _ingredients_changed(scraped: Product, stored: Product) -> bool:
    return ingredients_differ(scraped, stored) and len(scraped.ingredients) > 1


def _categories_invalid(scraped: Product, stored: Product) -> bool:
    return has_invalid_categories(stored.category)


# --- rule actions ---

def _price_changed(scraped: Product, stored: Product) -> ProductResponse:
    change_log.log_ingredient_change(stored, scraped.ingredients)
    product = _keep_last_updated(scraped.with_price_defaults(), stored)
    return ProductResponse(UpsertResponse.PriceChanged, product)


def _categories_replaced(scraped: Product, stored: Product) -> ProductResponse:
    change_log.log_category_change(stored, scraped)
    product = _keep_last_updated(scraped.with_price_defaults(), stored)
    return ProductResponse(UpsertResponse.InfoChanged, product)


def _info_changed(scraped: Product, stored: Product) -> ProductResponse:
    return ProductResponse(UpsertResponse.InfoChanged, _keep_last_updated(scraped, stored))


def _up_to_date(scraped: Product, stored: Product) -> ProductResponse:
    product = stored.model_copy(update={"lastChecked": scraped.lastChecked})
    return ProductResponse(UpsertResponse.AlreadyUpToDate, product)


RULES: List[Rule] = [
    Rule("ingredients", _ingredients_changed, _price_changed),
    Rule("categories", _categories_invalid, _categories_replaced),
    Rule("info", info_differs, _info_changed),
    Rule("unchanged", lambda scraped, stored: True, _up_to_date),
]


def build_new_product(scraped: Product) -> ProductResponse:
    return ProductResponse(UpsertResponse.NewProduct, scraped.with_price_defaults())


def build_updated_product(scraped: Product, stored: Product) -> ProductResponse:
    """
    Merge a scraped product with its stored row. Neither input is modified.
    """
    for rule in RULES:
        if rule.matches(scraped, stored):
            return rule.apply(scraped, stored)
    raise AssertionError("the last rule always matches")


def reconcile(scraped: Product, stored: Optional[Product] = None) -> ProductResponse:
    if stored is None:
        return build_new_product(scraped)
    return build_updated_product(scraped, stored)
