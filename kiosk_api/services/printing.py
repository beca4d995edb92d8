"""
PrintNode print relay client.

Receipts are sent as raw text (base64 encoded) to a printer registered with
PrintNode. Printing is best effort: order creation never fails because a
receipt could not be printed.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

PRINTNODE_API_URL = "https://api.printnode.com"
PRINT_JOB_SOURCE = "Kiosk Ordering"


class PrintError(Exception):
    """Raised when PrintNode rejects a request or cannot be reached."""


@dataclass(frozen=True)
class PrinterConfig:
    api_key: str
    printer_id: int


class PrintNodeClient:
    """Thin wrapper over the PrintNode REST API."""

    def __init__(self, base_url: str = PRINTNODE_API_URL, timeout: float = 15.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def send_print_job(self, receipt: str, printer: PrinterConfig, title: str = "Order Receipt") -> Any:
        """
        Submit a raw print job.

        Returns:
            The PrintNode print job id

        Raises:
            PrintError: PrintNode answered with an error or was unreachable
        """
        payload = {
            "printerId": printer.printer_id,
            "title": title,
            "contentType": "raw_base64",
            "content": base64.b64encode(receipt.encode("utf-8")).decode("ascii"),
            "source": PRINT_JOB_SOURCE,
        }
        try:
            response = requests.post(
                f"{self.base_url}/printjobs",
                json=payload,
                auth=(printer.api_key, ""),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PrintError(f"PrintNode request failed: {e}") from e

        if not response.ok:
            raise PrintError(f"PrintNode error {response.status_code}: {response.text}")

        try:
            job_id = response.json()
        except ValueError as e:
            raise PrintError(f"PrintNode returned an unreadable response: {e}") from e
        logger.info("Print job created: %s", job_id)
        return job_id

    def list_printers(self, api_key: str) -> List[Dict[str, Any]]:
        """Return ``id``, ``name`` and ``description`` of every printer on the account."""
        try:
            response = requests.get(
                f"{self.base_url}/printers",
                auth=(api_key, ""),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PrintError(f"PrintNode request failed: {e}") from e

        if not response.ok:
            raise PrintError(f"PrintNode error {response.status_code}: {response.text}")

        try:
            printers = response.json()
        except ValueError as e:
            raise PrintError(f"PrintNode returned an unreadable response: {e}") from e

        return [
            {"id": p.get("id"), "name": p.get("name"), "description": p.get("description")}
            for p in printers
        ]


def build_printer_config(api_key: Optional[str], printer_id: Optional[str]) -> Optional[PrinterConfig]:
    """Return a PrinterConfig when both settings are present and the id is numeric."""
    if not api_key or not printer_id:
        return None
    try:
        return PrinterConfig(api_key=api_key, printer_id=int(printer_id))
    except ValueError:
        logger.warning("Ignoring non-numeric PrintNode printer id")
        return None
