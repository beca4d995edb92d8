# kiosk_api/reset_orders.py

from kiosk_api.db import SessionLocal
from kiosk_api.models import Order


def reset_orders():
    if SessionLocal is None:
        print("DATABASE_URL is not set. Nothing to reset.")
        return

    db = SessionLocal()
    try:
        deleted = db.query(Order).delete()
        db.commit()
        print(f"Orders cleared ({deleted} rows).")
    finally:
        db.close()


if __name__ == "__main__":
    reset_orders()
