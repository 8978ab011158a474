#!/usr/bin/env python3
"""
Walk one checkout attempt from the terminal against a running proxy.

Creates an order, prints the PayPal approval link, waits for the buyer to
approve it in a browser, then captures. A recoverable decline starts over.
"""

import os
import sys

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from checkout.attempt import CheckoutAttempt  # noqa: E402
from checkout.client import CheckoutClient  # noqa: E402
from checkout.outcomes import (  # noqa: E402
    CheckoutError,
    Failure,
    RecoverableDecline,
    Success,
)

SANDBOX_APPROVE_URL = "https://www.sandbox.paypal.com/checkoutnow?token={order_id}"
MAX_RESTARTS = 3


def run_checkout(base_url: str | None = None) -> bool:
    base_url = base_url or os.getenv("CHECKOUT_BASE_URL", "http://localhost:8080")
    attempt = CheckoutAttempt(CheckoutClient(base_url))

    while not attempt.finished:
        try:
            order_id = attempt.start()
        except CheckoutError as e:
            print(f"❌ {e}")
            return False

        print(f"🛒 Order {order_id} created")
        print(f"   Approve it at: {SANDBOX_APPROVE_URL.format(order_id=order_id)}")
        input("   Press Enter once the buyer has approved... ")

        match attempt.complete():
            case Success() as outcome:
                print(f"✅ {outcome.message}")
            case RecoverableDecline() as outcome:
                print(f"🔁 {outcome.message}")
                if attempt.restarts >= MAX_RESTARTS:
                    print("❌ Giving up after repeated declines")
                    return False
            case Failure() as outcome:
                print(f"❌ {outcome.message}")

    return isinstance(attempt.outcome, Success)


if __name__ == "__main__":
    sys.exit(0 if run_checkout() else 1)
