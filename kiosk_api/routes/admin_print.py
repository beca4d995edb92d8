"""
Admin Printer Routes for the Kiosk API
======================================

Diagnostics for the PrintNode receipt printer configured in the
``printnode_api_key`` / ``printnode_printer_id`` settings.

Endpoints:
----------
- POST /api/admin/print/test: Print a sample receipt
- GET /api/admin/print/printers: List printers on the PrintNode account, so
  the admin can find the printer id to store
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import config
from ..auth import verify_admin_password
from ..db import get_db
from ..dependencies import get_printer
from ..services.printing import PrintError, PrintNodeClient
from ..services.receipt import generate_receipt
from ..services.settings_store import load_kiosk_settings


logger = logging.getLogger(__name__)

admin_print_router = APIRouter(prefix="/api/admin/print", tags=["Admin - Printing"])

TEST_ORDER: Dict[str, Any] = {
    "order_number": "TEST001",
    "items": [
        {"name": "Test Item 1", "price": 10.00, "quantity": 2},
        {"name": "Test Item 2", "price": 5.50, "quantity": 1},
    ],
    "subtotal": 25.50,
    "tax": 2.35,
    "kiosk_fee": 3.00,
    "total": 30.85,
    "customer_name": "Test Customer",
    "customer_phone": "(555) 123-4567",
    "delivery_location": "Table 1",
}


@admin_print_router.post("/test")
def print_test_receipt(
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
    printer_client: PrintNodeClient = Depends(get_printer),
) -> Dict[str, Any]:
    printer = load_kiosk_settings(db).printer
    if printer is None:
        raise HTTPException(status_code=400, detail="PrintNode not configured")

    receipt = generate_receipt(TEST_ORDER, restaurant_name=config.RESTAURANT_NAME, tax_rate=config.TAX_RATE)
    try:
        job_id = printer_client.send_print_job(receipt, printer, title="Test Receipt")
    except PrintError as e:
        logger.error("Test print failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to send print job")

    return {"success": True, "printJobId": job_id}


@admin_print_router.get("/printers")
def list_printers(
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
    printer_client: PrintNodeClient = Depends(get_printer),
) -> List[Dict[str, Any]]:
    api_key = load_kiosk_settings(db).printnode_api_key
    if not api_key:
        raise HTTPException(status_code=400, detail="PrintNode API key not configured")

    try:
        return printer_client.list_printers(api_key)
    except PrintError as e:
        logger.error("Fetch printers error: %s", e)
        raise HTTPException(status_code=400, detail="Failed to fetch printers")
