"""
Public menu assembly.

The kiosk loads the whole menu in one request: a mapping from category name to
that category's available items. Categories keep their ``sort_order``, and so
do items within a category. Unavailable items are left out; categories with no
available items are still present (as an empty list) so the tab bar is stable.
"""

from collections import OrderedDict
from typing import Dict, List

from sqlalchemy.orm import Session

from ..models import MenuCategory, MenuItem


def build_public_menu(db: Session) -> Dict[str, List[dict]]:
    categories = (
        db.query(MenuCategory)
        .order_by(MenuCategory.sort_order.asc(), MenuCategory.id.asc())
        .all()
    )
    items = (
        db.query(MenuItem)
        .filter(MenuItem.available.is_(True))
        .order_by(MenuItem.sort_order.asc(), MenuItem.id.asc())
        .all()
    )

    by_category: Dict[int, List[dict]] = {}
    for item in items:
        by_category.setdefault(item.category_id, []).append({
            "id": item.id,
            "name": item.name,
            "price": float(item.price),
            "description": item.description,
        })

    menu: Dict[str, List[dict]] = OrderedDict()
    for category in categories:
        menu[category.name] = by_category.get(category.id, [])
    return menu
