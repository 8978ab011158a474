"""
Result types returned by the checkout client.

Approving an order ends in exactly one Outcome; callers branch on it with
`match` rather than catching exceptions.
"""

from dataclasses import dataclass, field
from typing import Any, Union


class CheckoutError(Exception):
    """Raised when an order cannot be created or a checkout step is out of order."""


@dataclass(frozen=True)
class Transaction:
    id: str | None
    status: str | None
    raw: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Success:
    transaction: Transaction

    @property
    def message(self) -> str:
        return f"Transaction {self.transaction.status}: {self.transaction.id}"


@dataclass(frozen=True)
class RecoverableDecline:
    """The buyer's funding source was declined; restart so they can pick another."""

    message: str = "Your payment method was declined. Please choose another one."


@dataclass(frozen=True)
class Failure:
    reason: str
    declined: bool = False  # True when PayPal declined, False for errors

    @property
    def message(self) -> str:
        return f"Sorry, your transaction could not be processed... {self.reason}"


Outcome = Union[Success, RecoverableDecline, Failure]


@dataclass(frozen=True)
class RefundResult:
    ok: bool
    message: str
    body: dict[str, Any] = field(default_factory=dict)
