"""
Admin Menu Routes for the Kiosk API
===================================

This module contains admin endpoints for managing menu categories and menu
items. Categories are the tabs on the kiosk screen; items are the products
inside them.

Endpoints:
----------
- GET /api/admin/categories: List categories
- POST /api/admin/categories: Create a category
- GET /api/admin/categories/{id}: Get a category
- PUT /api/admin/categories/{id}: Update a category
- DELETE /api/admin/categories/{id}: Delete an empty category
- GET /api/admin/items: List all items, including unavailable ones
- POST /api/admin/items: Create an item
- GET /api/admin/items/{id}: Get an item
- PUT /api/admin/items/{id}: Update an item
- DELETE /api/admin/items/{id}: Delete an item

Authentication:
---------------
All endpoints require the ``X-Admin-Password`` header. See auth.py.

Validation:
-----------
- Prices may not be negative (422 from the request schema).
- ``category_id`` must name an existing category (400).
- A category that still has items cannot be deleted (400); deleting never
  cascades to items.

Usage:
------
    POST /api/admin/items
    X-Admin-Password: ...
    {"category_id": 1, "name": "Wings", "price": 10.99, "description": "Six wings"}
"""

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth import verify_admin_password
from ..db import get_db
from ..models import MenuCategory, MenuItem
from ..schemas.menu import (
    CategoryCreate,
    CategoryOut,
    CategoryUpdate,
    MenuItemCreate,
    MenuItemOut,
    MenuItemUpdate,
)


logger = logging.getLogger(__name__)

admin_menu_router = APIRouter(prefix="/api/admin", tags=["Admin - Menu"])


# =============================================================================
# Helper Functions
# =============================================================================

def serialize_menu_item(item: MenuItem) -> MenuItemOut:
    """Convert MenuItem model to response schema."""
    return MenuItemOut(
        id=item.id,
        category_id=item.category_id,
        category_name=item.category.name if item.category else None,
        name=item.name,
        price=float(item.price),
        description=item.description,
        available=item.available,
        sort_order=item.sort_order,
    )


def _get_category_or_404(db: Session, category_id: int) -> MenuCategory:
    category = db.get(MenuCategory, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


def _get_item_or_404(db: Session, item_id: int) -> MenuItem:
    item = db.get(MenuItem, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return item


def _require_category(db: Session, category_id: int) -> None:
    if db.get(MenuCategory, category_id) is None:
        raise HTTPException(status_code=400, detail=f"Category {category_id} does not exist")


# =============================================================================
# Category Endpoints
# =============================================================================

@admin_menu_router.get("/categories", response_model=List[CategoryOut])
def list_categories(
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> List[MenuCategory]:
    return (
        db.query(MenuCategory)
        .order_by(MenuCategory.sort_order.asc(), MenuCategory.id.asc())
        .all()
    )


@admin_menu_router.post("/categories", response_model=CategoryOut)
def create_category(
    payload: CategoryCreate,
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> MenuCategory:
    category = MenuCategory(name=payload.name, sort_order=payload.sort_order)
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Category created: %s (id=%d)", category.name, category.id)
    return category


@admin_menu_router.get("/categories/{category_id}", response_model=CategoryOut)
def get_category(
    category_id: int,
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> MenuCategory:
    return _get_category_or_404(db, category_id)


@admin_menu_router.put("/categories/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> MenuCategory:
    """Update a category. Only provided fields are changed."""
    category = _get_category_or_404(db, category_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(category, field, value)
    db.commit()
    db.refresh(category)
    return category


@admin_menu_router.delete("/categories/{category_id}")
def delete_category(
    category_id: int,
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> Dict[str, bool]:
    category = _get_category_or_404(db, category_id)
    if db.query(MenuItem).filter(MenuItem.category_id == category_id).count():
        raise HTTPException(
            status_code=400,
            detail="Category still has menu items; move or delete them first",
        )
    db.delete(category)
    db.commit()
    logger.info("Category deleted: id=%d", category_id)
    return {"success": True}


# =============================================================================
# Menu Item Endpoints
# =============================================================================

@admin_menu_router.get("/items", response_model=List[MenuItemOut])
def list_items(
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> List[MenuItemOut]:
    """List all menu items, including unavailable ones."""
    items = db.query(MenuItem).order_by(MenuItem.sort_order.asc(), MenuItem.id.asc()).all()
    return [serialize_menu_item(item) for item in items]


@admin_menu_router.post("/items", response_model=MenuItemOut)
def create_item(
    payload: MenuItemCreate,
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> MenuItemOut:
    _require_category(db, payload.category_id)
    item = MenuItem(**payload.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Menu item created: %s (id=%d)", item.name, item.id)
    return serialize_menu_item(item)


@admin_menu_router.get("/items/{item_id}", response_model=MenuItemOut)
def get_item(
    item_id: int,
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> MenuItemOut:
    return serialize_menu_item(_get_item_or_404(db, item_id))


@admin_menu_router.put("/items/{item_id}", response_model=MenuItemOut)
def update_item(
    item_id: int,
    payload: MenuItemUpdate,
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> MenuItemOut:
    """Update a menu item. Only provided fields are changed."""
    item = _get_item_or_404(db, item_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("category_id") is not None:
        _require_category(db, changes["category_id"])

    for field, value in changes.items():
        # description may be cleared; other fields ignore explicit nulls
        if value is not None or field == "description":
            setattr(item, field, value)
    db.commit()
    db.refresh(item)
    return serialize_menu_item(item)


@admin_menu_router.delete("/items/{item_id}")
def delete_item(
    item_id: int,
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> Dict[str, bool]:
    item = _get_item_or_404(db, item_id)
    db.delete(item)
    db.commit()
    logger.info("Menu item deleted: id=%d", item_id)
    return {"success": True}
