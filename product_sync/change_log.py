# change_log.py
"""
Console notifications for what a sync run changed.

Lines are printed through a shared rich Console so colour is dropped
automatically when output is not a terminal.
"""
from typing import List, Optional

from rich.console import Console

from .schema import Product

console = Console(highlight=False, emoji=False)


def _fit(text: str, width: int) -> str:
    return text[:width].ljust(width)


def _join(values: Optional[List[str]], sep: str = " ") -> str:
    return sep.join(values or [])


def log(style: Optional[str], message: str) -> None:
    # markup off: product names may contain square brackets
    console.print(message, style=style, markup=False, soft_wrap=True)


def log_error(message: str) -> None:
    log("red", message)


def log_new_product(product: Product) -> None:
    log(None, f"  New Product: {_fit(product.name, 47)} - {len(product.ingredients)}")


def log_ingredient_change(product: Product, new_ingredients: List[str]) -> None:
    """
    Red when the ingredient list grew, green when it shrank or kept its length.
    """
    increased = len(new_ingredients) > len(product.ingredients)
    log(
        "red" if increased else "green",
        "  Ingredients "
        + ("Increased: " if increased else "Decreased: ")
        + _fit(product.name, 47)
        + " | "
        + _fit(_join(product.ingredients, ", "), 50)
        + " > "
        + _join(new_ingredients, ", ")[:50],
    )


def log_category_change(stored: Product, scraped: Product) -> None:
    log(
        "yellow",
        f"  Categories Changed: {_fit(scraped.name, 40)}"
        f" - {_join(stored.category)} > {_join(scraped.category)}",
    )


def log_summary(counts: dict) -> None:
    parts = [f"{name}: {count}" for name, count in counts.items() if count]
    log("cyan", "  " + (" | ".join(parts) if parts else "Nothing synced"))
