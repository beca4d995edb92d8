from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class MenuCategory(Base):
    __tablename__ = "menu_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # No cascade: removing a category's items is left to the admin
    items = relationship("MenuItem", back_populates="category")


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("menu_categories.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    description = Column(Text, nullable=True)
    available = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    category = relationship("MenuCategory", back_populates="items")

    __table_args__ = (
        Index("ix_menu_items_available_sort", "available", "sort_order"),
        CheckConstraint("price >= 0", name="ck_menu_items_price_non_negative"),
    )


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, nullable=False, unique=True, index=True)
    # Snapshot of the cart lines at purchase time
    items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0.0)
    tax = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0.0)
    kiosk_fee = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0.0)
    total = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0.0)
    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    delivery_location = Column(Text, nullable=True)
    payment_reference = Column(String, nullable=True, index=True)
    payment_provider = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending", index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)


class KioskSetting(Base):
    """Key/value configuration written by the admin panel and OAuth flows."""
    __tablename__ = "kiosk_settings"

    setting_key = Column(String, primary_key=True)
    setting_value = Column(Text, nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
