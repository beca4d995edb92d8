"""
Kiosk Settings Store
====================

The admin panel and the payment OAuth flows write configuration to the
``kiosk_settings`` key/value table. This module is the only place that knows
the key names: everything else receives a typed ``KioskSettings`` object.

Known Keys:
-----------
- kiosk_fee: Flat fee per order (string decimal, default from config)
- stripe_connected_account_id: Stripe Connect Express account of the restaurant
- printnode_api_key / printnode_printer_id: Receipt printer
- square_oauth_state: One-shot anti-forgery token for the Square OAuth redirect
- square_merchant_id / square_merchant_access_token /
  square_merchant_refresh_token / square_merchant_location_id: Connected
  Square merchant
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from sqlalchemy.orm import Session

from .. import config
from ..models import KioskSetting
from .printing import PrinterConfig, build_printer_config


logger = logging.getLogger(__name__)

KIOSK_FEE = "kiosk_fee"
STRIPE_CONNECTED_ACCOUNT_ID = "stripe_connected_account_id"
PRINTNODE_API_KEY = "printnode_api_key"
PRINTNODE_PRINTER_ID = "printnode_printer_id"
SQUARE_OAUTH_STATE = "square_oauth_state"
SQUARE_MERCHANT_ID = "square_merchant_id"
SQUARE_MERCHANT_ACCESS_TOKEN = "square_merchant_access_token"
SQUARE_MERCHANT_REFRESH_TOKEN = "square_merchant_refresh_token"
SQUARE_MERCHANT_LOCATION_ID = "square_merchant_location_id"

SQUARE_MERCHANT_KEYS = (
    SQUARE_MERCHANT_ID,
    SQUARE_MERCHANT_ACCESS_TOKEN,
    SQUARE_MERCHANT_REFRESH_TOKEN,
    SQUARE_MERCHANT_LOCATION_ID,
)


@dataclass(frozen=True)
class KioskSettings:
    """Typed view of the settings table."""

    kiosk_fee: float = config.DEFAULT_KIOSK_FEE
    stripe_connected_account_id: Optional[str] = None
    printnode_api_key: Optional[str] = None
    printnode_printer_id: Optional[str] = None
    square_merchant_id: Optional[str] = None
    square_merchant_access_token: Optional[str] = None
    square_merchant_refresh_token: Optional[str] = None
    square_merchant_location_id: Optional[str] = None

    @property
    def printer(self) -> Optional[PrinterConfig]:
        return build_printer_config(self.printnode_api_key, self.printnode_printer_id)

    @property
    def square_merchant_connected(self) -> bool:
        return bool(self.square_merchant_id and self.square_merchant_access_token)

    @classmethod
    def from_mapping(cls, values: Dict[str, Optional[str]]) -> "KioskSettings":
        return cls(
            kiosk_fee=parse_kiosk_fee(values.get(KIOSK_FEE)),
            stripe_connected_account_id=values.get(STRIPE_CONNECTED_ACCOUNT_ID) or None,
            printnode_api_key=values.get(PRINTNODE_API_KEY) or None,
            printnode_printer_id=values.get(PRINTNODE_PRINTER_ID) or None,
            square_merchant_id=values.get(SQUARE_MERCHANT_ID) or None,
            square_merchant_access_token=values.get(SQUARE_MERCHANT_ACCESS_TOKEN) or None,
            square_merchant_refresh_token=values.get(SQUARE_MERCHANT_REFRESH_TOKEN) or None,
            square_merchant_location_id=values.get(SQUARE_MERCHANT_LOCATION_ID) or None,
        )


def parse_kiosk_fee(raw: Optional[str]) -> float:
    """Parse the stored fee; blank, invalid or negative values use the default."""
    if raw is None or str(raw).strip() == "":
        return config.DEFAULT_KIOSK_FEE
    try:
        fee = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid kiosk_fee setting %r, using default", raw)
        return config.DEFAULT_KIOSK_FEE
    if not math.isfinite(fee) or fee < 0:
        logger.warning("Out of range kiosk_fee setting %r, using default", raw)
        return config.DEFAULT_KIOSK_FEE
    return fee


def get_all_settings(db: Session) -> Dict[str, Optional[str]]:
    rows = db.query(KioskSetting).order_by(KioskSetting.setting_key).all()
    return {row.setting_key: row.setting_value for row in rows}


def load_kiosk_settings(db: Optional[Session]) -> KioskSettings:
    """Load typed settings; without a database every field has its default."""
    if db is None:
        return KioskSettings()
    return KioskSettings.from_mapping(get_all_settings(db))


def get_setting(db: Session, key: str) -> Optional[str]:
    row = db.get(KioskSetting, key)
    return row.setting_value if row else None


def upsert_setting(db: Session, key: str, value: Optional[str], commit: bool = True) -> KioskSetting:
    """Create or overwrite a setting (last write wins)."""
    row = db.get(KioskSetting, key)
    if row is None:
        row = KioskSetting(setting_key=key, setting_value=value)
        db.add(row)
    else:
        row.setting_value = value
    if commit:
        db.commit()
        db.refresh(row)
    logger.info("Setting updated: %s", key)
    return row


def delete_settings(db: Session, keys: Iterable[str], commit: bool = True) -> int:
    keys = list(keys)
    deleted = (
        db.query(KioskSetting)
        .filter(KioskSetting.setting_key.in_(keys))
        .delete(synchronize_session=False)
    )
    if commit:
        db.commit()
    return deleted
