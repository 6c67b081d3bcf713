import hashlib
import hmac
from decimal import Decimal, ROUND_HALF_UP
import requests

from services.errors import UpstreamError
from services.logger import get_logger

logger = get_logger('payment_gateway')

RAZORPAY_ORDERS_URL = "https://api.razorpay.com/v1/orders"


def to_smallest_unit(amount):
    """Convert a decimal amount to paise/cents, rounding half up."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def compute_signature(order_id, payment_id, secret):
    payload = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify_signature(order_id, payment_id, signature, secret):
    """Check the checkout signature Razorpay returns with a captured payment."""
    if not signature:
        return False
    expected = compute_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected, str(signature))


class RazorpayClient:
    def __init__(self, key_id, key_secret, timeout=5):
        self.key_id = key_id
        self.key_secret = key_secret
        self.timeout = timeout

    def create_order(self, amount, currency, receipt, notes=None):
        payload = {
            "amount": to_smallest_unit(amount),
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        try:
            r = requests.post(RAZORPAY_ORDERS_URL, json=payload,
                              auth=(self.key_id, self.key_secret), timeout=self.timeout)
            r.raise_for_status()
            res = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Razorpay order error for {receipt}: {e}")
            raise UpstreamError("Payment gateway error") from e

        if not res.get("id"):
            logger.error(f"Razorpay order response missing id for {receipt}: {res}")
            raise UpstreamError("Payment gateway error")

        return {
            "orderId": res["id"],
            "amount": res.get("amount", payload["amount"]),
            "currency": res.get("currency", currency),
        }
