#!/usr/bin/env python3
"""
Refund a captured payment through a running checkout proxy.
Prompts for the capture id, like the refund button on the checkout page.
"""

import os
import sys

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from checkout.client import CheckoutClient  # noqa: E402


def refund_capture(base_url: str | None = None) -> bool:
    """Ask for a capture id and refund it. Returns True when PayPal accepted it."""
    base_url = base_url or os.getenv("CHECKOUT_BASE_URL", "http://localhost:8080")
    captured_payment_id = input("Enter the captured payment ID to refund: ").strip()
    if not captured_payment_id:
        print("No capture id given, nothing refunded")
        return False

    result = CheckoutClient(base_url).refund(captured_payment_id)
    print(f"{'✅' if result.ok else '❌'} {result.message}")
    return result.ok


if __name__ == "__main__":
    sys.exit(0 if refund_capture() else 1)
