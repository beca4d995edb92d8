"""
Menu Schemas for the Kiosk API
==============================

Pydantic models for menu categories and menu items, used by the admin CRUD
endpoints and the public menu endpoint.

Endpoint Coverage:
------------------
- GET/POST /api/admin/categories, GET/PUT/DELETE /api/admin/categories/{id}
- GET/POST /api/admin/items, GET/PUT/DELETE /api/admin/items/{id}
- GET /api/menu (PublicMenuItem)

Menu Concepts:
--------------
1. **Categories**: Tabs on the kiosk screen, ordered by ``sort_order``.

2. **Items**: Products inside a category. ``available=False`` hides an item
   from the kiosk without deleting it. Prices are dollars and never negative.

Usage:
------
    MenuItemCreate(category_id=1, name="Wings", price=10.99)
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    sort_order: int


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    sort_order: int = 0


class CategoryUpdate(BaseModel):
    """All fields optional - only provided fields are updated."""
    name: Optional[str] = Field(default=None, min_length=1)
    sort_order: Optional[int] = None


class MenuItemOut(BaseModel):
    """
    Admin view of a menu item.

    Attributes:
        category_name: Name of the owning category, for the admin table
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: int
    category_name: Optional[str] = None
    name: str
    price: float
    description: Optional[str] = None
    available: bool
    sort_order: int


class MenuItemCreate(BaseModel):
    category_id: int
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    description: Optional[str] = None
    available: bool = True
    sort_order: int = 0


class MenuItemUpdate(BaseModel):
    """All fields optional - only provided fields are updated."""
    category_id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    available: Optional[bool] = None
    sort_order: Optional[int] = None


class PublicMenuItem(BaseModel):
    """What the kiosk needs to display and add an item to the cart."""
    id: int
    name: str
    price: float
    description: Optional[str] = None
