from typing import Iterable, Optional

# Canonical category slugs. Anything a stored product carries outside this
# set is stale and gets replaced by the freshly scraped categories.
VALID_CATEGORIES = frozenset({
    # fresh
    "fruit",
    "vegetables",
    "salads-coleslaw",
    "fresh-herbs",
    # bakery
    "bread",
    "bread-rolls",
    "specialty-bread",
    "bakery-cakes",
    "bakery-desserts",
    # chilled and dairy
    "eggs",
    "butter",
    "cheese",
    "cream",
    "yoghurt",
    "milk",
    "plant-based-milk",
    "dips",
    "deli",
    # meat and seafood
    "beef-lamb",
    "chicken",
    "ham",
    "bacon",
    "pork",
    "patties-meatballs",
    "sausages",
    "deli-meats",
    "meat-alternatives",
    "seafood",
    "salmon",
    # frozen
    "frozen-meals",
    "frozen-vegetables",
    "frozen-chips",
    "ice-cream",
    "frozen-desserts",
    "pizza",
    # pantry
    "rice",
    "pasta",
    "noodles",
    "canned-fish",
    "canned-vegetables",
    "canned-fruit",
    "soup",
    "sauces",
    "oils-vinegars",
    "spreads",
    "spices",
    "baking",
    "breakfast-cereals",
    "muesli",
    "oats",
    "biscuits",
    "crackers",
    "chocolate",
    "lollies",
    "chips",
    "nuts-dried-fruit",
    # drinks
    "coffee",
    "tea",
    "juice",
    "soft-drinks",
    "energy-drinks",
    "sports-drinks",
    "water",
    "beer",
    "wine",
    # household
    "cat-food",
    "dog-food",
    "cleaning",
    "toilet-paper",
    "tissues",
    "laundry",
    "dishwashing",
    "personal-care",
    "baby",
})


def is_valid_category(category: str) -> bool:
    return category in VALID_CATEGORIES


def has_invalid_categories(categories: Optional[Iterable[str]]) -> bool:
    """
    True when `categories` is missing or holds any label outside the allow-list.
    """
    if categories is None:
        return True
    return not all(is_valid_category(c) for c in categories)
