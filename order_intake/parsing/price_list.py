"""Reconcile parsed orders against the product price list.

Customers often write a product without a quantity ("Dawet Kemayu Large"),
which the parsers keep as a note. These helpers move such notes back into
the item list and price the result.
"""
import logging
import math
import re

from order_intake.core.draft_order import OrderItem

logger = logging.getLogger("order_intake.price_list")

PACKAGING_BOX_PRICE = 40000
CUPS_PER_BOX = 50
_CUP_SIZES = ("small", "medium", "large")

_PUNCTUATION = re.compile(r"[^\w\s+]")
_YES = re.compile(r"\b(?:ya|yes)\b")


def normalize_product_name(name: str | None) -> str:
    if not name:
        return ""
    normalized = re.sub(r"^[-•]\s*", "", name.strip().lower())
    normalized = _PUNCTUATION.sub("", re.sub(r"\s+", " ", normalized))
    return re.sub(r"\btoping\b", "topping", normalized).strip()


def _significant_words(text: str) -> list[str]:
    return [word for word in text.split() if len(word) > 2]


def _matches_product(note: str, product: str) -> bool:
    note_text = re.sub(r"\s+", " ", note.lower()).strip()
    product_text = re.sub(r"\s+", " ", product.lower()).strip()
    if note_text == product_text:
        return True
    if note_text not in product_text and product_text not in note_text:
        return False

    note_words = _significant_words(note_text)
    product_words = _significant_words(product_text)
    matching = [word for word in note_words if word in product_words]
    longest = max(len(note_words), len(product_words))
    ratio = len(matching) / longest if longest else 0.0
    return ratio >= 0.6 or len(matching) >= 2


def separate_items_from_notes(
    items: list[OrderItem],
    notes: list[str],
    price_list: dict[str, int],
) -> tuple[list[OrderItem], list[str]]:
    """Move notes that name a price-list product into the items (quantity 1).

    Returns new `(items, notes)` lists; the inputs are not modified.
    """
    final_items = list(items)
    final_notes = []

    for note in notes:
        product = next((key for key in price_list if _matches_product(note, key)), None)
        if product is None:
            final_notes.append(note)
            continue
        final_items.append(OrderItem(quantity=1, name=product))
        logger.info(f"Moved note {note!r} to items as {product!r}")

    return final_items, final_notes


def lookup_unit_price(item_name: str, price_list: dict[str, int]) -> int | None:
    wanted = normalize_product_name(item_name)
    for product, price in price_list.items():
        if normalize_product_name(product) == wanted:
            return price
    logger.warning(f"No price found for item {item_name!r}")
    return None


def _packaging_requested(note: str) -> bool:
    lowered = note.lower()
    if "packaging" not in lowered or "tidak" in lowered:
        return False
    return bool(_YES.search(lowered))


def calculate_packaging_fee(items: list[OrderItem], notes: list[str]) -> int:
    """Styrofoam boxes hold 50 cups at 40k each. Only charged when requested in the notes."""
    if not any(_packaging_requested(note) for note in notes):
        return 0

    cups = 0
    for item in items:
        name = item.name.lower()
        if "dawet" in name and "botol" not in name and any(size in name for size in _CUP_SIZES):
            cups += item.quantity
    return math.ceil(cups / CUPS_PER_BOX) * PACKAGING_BOX_PRICE


def calculate_order_total(
    items: list[OrderItem],
    notes: list[str],
    price_list: dict[str, int],
    delivery_fee: int | None = 0,
) -> int:
    """Subtotal of priced items plus packaging and delivery. Unpriced items count as 0."""
    subtotal = 0
    for item in items:
        price = lookup_unit_price(item.name, price_list)
        if price:
            subtotal += price * item.quantity
    return subtotal + calculate_packaging_fee(items, notes) + (delivery_fee or 0)
