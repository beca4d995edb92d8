"""
Admin Settings Routes for the Kiosk API
=======================================

Endpoints:
----------
- GET /api/admin/settings: All settings as a ``{key: value}`` object
- PUT /api/admin/settings/{key}: Create or overwrite one setting

Writes are last-write-wins. Square merchant tokens and the pending OAuth state
are written by the Square connect flow and are left out of the listing.
"""

import logging
import math
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth import verify_admin_password
from ..db import get_db
from ..schemas.payments import SettingOut, SettingUpdate
from ..services.settings_store import (
    KIOSK_FEE,
    SQUARE_MERCHANT_ACCESS_TOKEN,
    SQUARE_MERCHANT_REFRESH_TOKEN,
    SQUARE_OAUTH_STATE,
    get_all_settings,
    upsert_setting,
)


logger = logging.getLogger(__name__)

admin_settings_router = APIRouter(prefix="/api/admin/settings", tags=["Admin - Settings"])

HIDDEN_SETTINGS = {SQUARE_OAUTH_STATE, SQUARE_MERCHANT_ACCESS_TOKEN, SQUARE_MERCHANT_REFRESH_TOKEN}


@admin_settings_router.get("")
def list_settings(
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> Dict[str, Optional[str]]:
    return {
        key: value
        for key, value in get_all_settings(db).items()
        if key not in HIDDEN_SETTINGS
    }


@admin_settings_router.put("/{key}", response_model=SettingOut)
def update_setting(
    key: str,
    payload: SettingUpdate,
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
) -> SettingOut:
    value = payload.as_text()
    if key == KIOSK_FEE and value is not None:
        try:
            fee = float(value)
        except ValueError:
            raise HTTPException(status_code=400, detail="kiosk_fee must be a number")
        if not math.isfinite(fee):
            raise HTTPException(status_code=400, detail="kiosk_fee must be a number")
        if fee < 0:
            raise HTTPException(status_code=400, detail="kiosk_fee cannot be negative")

    row = upsert_setting(db, key, value)
    return SettingOut.model_validate(row)
