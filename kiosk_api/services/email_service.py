"""
Email service for new-order notifications.

Sends the restaurant an email for every kiosk order through Resend when
configured, and only logs in mock mode.

Environment variables (see config.py):
- RESEND_API_KEY: Resend API key
- RESTAURANT_EMAIL: Inbox that receives order notifications
- ORDER_EMAIL_FROM: Sender address
"""

import html
import logging
from typing import Any, Dict

import resend

from ..config import EmailConfig, get_email_config

logger = logging.getLogger(__name__)


class EmailError(Exception):
    """Raised when Resend rejects the message or cannot be reached."""


def esc(value: Any) -> str:
    return html.escape(str(value if value is not None else ""))


def format_items_list(items: list) -> str:
    return "\n".join(
        f"- {item['name']} x{item['quantity']} @ ${float(item['price']) * int(item['quantity']):.2f}"
        for item in items
    )


def build_order_email(order: Dict[str, Any], restaurant_name: str, tax_rate: float) -> Dict[str, str]:
    """Build the subject and HTML body for a new order."""
    items_list = format_items_list(order.get("items") or [])

    subject = f"New Order #{order['order_number']} - {restaurant_name} Kiosk"
    body_html = f"""
<h1>New Kiosk Order</h1>
<p><strong>Order Number:</strong> {esc(order['order_number'])}</p>
<p><strong>Customer:</strong> {esc(order.get('customer_name'))}</p>
<p><strong>Phone:</strong> {esc(order.get('customer_phone'))}</p>
<p><strong>Location:</strong> {esc(order.get('delivery_location'))}</p>

<h2>Items:</h2>
<pre>{esc(items_list)}</pre>

<h2>Order Summary:</h2>
<p>Subtotal: ${order['subtotal']:.2f}</p>
<p>Kiosk Fee: ${order['kiosk_fee']:.2f}</p>
<p>Tax ({tax_rate * 100:g}%): ${order['tax']:.2f}</p>
<p><strong>Total: ${order['total']:.2f}</strong></p>

<p>Payment Reference: {esc(order.get('payment_reference'))}</p>
"""
    return {"subject": subject, "html": body_html}


class OrderEmailer:
    """Sends order notifications to the restaurant inbox."""

    def __init__(self, email_config: EmailConfig = None):
        self.config = email_config or get_email_config()

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def send_order_notification(self, order: Dict[str, Any], tax_rate: float) -> Dict[str, Any]:
        """
        Email the restaurant about a new order.

        Returns:
            dict with status and the Resend message id

        Raises:
            EmailError: Resend failed
        """
        message = build_order_email(order, self.config.restaurant_name, tax_rate)

        if not self.enabled:
            logger.info("MOCK EMAIL: Subject: %s", message["subject"])
            return {"status": "skipped", "mock": True, "subject": message["subject"]}

        resend.api_key = self.config.api_key
        try:
            sent = resend.Emails.send({
                "from": self.config.sender,
                "to": [self.config.recipient],
                "subject": message["subject"],
                "html": message["html"],
            })
        except Exception as e:
            raise EmailError(f"Failed to send order email: {e}") from e

        message_id = sent.get("id") if isinstance(sent, dict) else getattr(sent, "id", None)
        logger.info("Email sent for order %s", order["order_number"])
        return {"status": "sent", "mock": False, "id": message_id, "subject": message["subject"]}
