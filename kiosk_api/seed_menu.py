from kiosk_api.db import SessionLocal
from kiosk_api.models import MenuCategory, MenuItem


STARTER_MENU = [
    ("Appetizers", [
        ("Buffalo Wings", 10.99, "Six wings tossed in buffalo sauce"),
        ("Mozzarella Sticks", 8.49, "With marinara"),
        ("Loaded Fries", 7.99, "Cheddar, bacon and scallions"),
    ]),
    ("Entrees", [
        ("Classic Burger", 13.99, "Half-pound patty, lettuce, tomato, onion"),
        ("Chicken Tenders", 12.49, "Served with fries and honey mustard"),
        ("Grilled Salmon", 18.99, "Rice pilaf and seasonal vegetables"),
    ]),
    ("Drinks", [
        ("Fountain Soda", 2.99, None),
        ("Iced Tea", 2.99, "Sweet or unsweetened"),
        ("Lemonade", 3.49, None),
    ]),
    ("Desserts", [
        ("Chocolate Cake", 6.99, None),
        ("Cheesecake", 7.49, "New York style"),
    ]),
]


def seed_menu():
    # Note: Tables should be created via Alembic migrations.
    # Run `alembic upgrade head` before seeding if database is empty.
    if SessionLocal is None:
        print("DATABASE_URL is not set. Nothing to seed.")
        return

    db = SessionLocal()
    try:
        existing = db.query(MenuItem).count()
        if existing > 0:
            print(f"Menu already has {existing} items. Not seeding again.")
            return

        for category_order, (category_name, items) in enumerate(STARTER_MENU):
            category = MenuCategory(name=category_name, sort_order=category_order)
            db.add(category)
            db.flush()
            for item_order, (name, price, description) in enumerate(items):
                db.add(MenuItem(
                    category_id=category.id,
                    name=name,
                    price=price,
                    description=description,
                    available=True,
                    sort_order=item_order,
                ))

        db.commit()
        print(f"Seeded {sum(len(items) for _, items in STARTER_MENU)} menu items.")
    finally:
        db.close()


if __name__ == "__main__":
    seed_menu()
