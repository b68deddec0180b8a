from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True)
class CatalogItem:
    id: int
    name: str
    price: Decimal


MENU_ITEMS: Tuple[CatalogItem, ...] = (
    CatalogItem(1, "Pizza Margherita", Decimal("12.99")),
    CatalogItem(2, "Chicken Burger", Decimal("9.99")),
    CatalogItem(3, "Caesar Salad", Decimal("8.50")),
    CatalogItem(4, "Pasta Carbonara", Decimal("11.99")),
    CatalogItem(5, "Fish & Chips", Decimal("13.50")),
    CatalogItem(6, "Chocolate Cake", Decimal("6.99")),
)

_BY_ID = {item.id: item for item in MENU_ITEMS}


def get_item(item_id) -> Optional[CatalogItem]:
    try:
        return _BY_ID.get(int(item_id))
    except (TypeError, ValueError):
        return None
