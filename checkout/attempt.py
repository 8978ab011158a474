"""
Checkout attempt state machine.

INIT -> ORDER_CREATED -> CAPTURED | DECLINED_FINAL | ERROR, with a
recoverable decline sending the attempt back to INIT for another try.
"""

from enum import Enum

import structlog

from checkout.client import CheckoutClient
from checkout.outcomes import (
    CheckoutError,
    Failure,
    Outcome,
    RecoverableDecline,
    Success,
)

log = structlog.get_logger(__name__)


class CheckoutState(str, Enum):
    INIT = "INIT"
    ORDER_CREATED = "ORDER_CREATED"
    CAPTURED = "CAPTURED"
    DECLINED_FINAL = "DECLINED_FINAL"
    ERROR = "ERROR"


TERMINAL_STATES = {
    CheckoutState.CAPTURED,
    CheckoutState.DECLINED_FINAL,
    CheckoutState.ERROR,
}


class CheckoutAttempt:
    def __init__(self, client: CheckoutClient, card: bool = False):
        self.client = client
        self.card = card
        self.state = CheckoutState.INIT
        self.order_id: str | None = None
        self.outcome: Outcome | None = None
        self.restarts = 0

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def start(self, cart=None) -> str:
        if self.state is not CheckoutState.INIT:
            raise CheckoutError(f"Cannot create an order from state {self.state.value}")
        try:
            self.order_id = self.client.create_order(cart)
        except CheckoutError:
            self._move(CheckoutState.ERROR)
            raise
        self._move(CheckoutState.ORDER_CREATED)
        return self.order_id

    def complete(self) -> Outcome:
        if self.state is not CheckoutState.ORDER_CREATED:
            raise CheckoutError(f"Cannot capture from state {self.state.value}")

        outcome = self.client.approve(self.order_id, card=self.card)
        self.outcome = outcome
        match outcome:
            case Success():
                self._move(CheckoutState.CAPTURED)
            case RecoverableDecline():
                # Back to the start; the buyer approves a fresh order
                self.restarts += 1
                self.order_id = None
                self._move(CheckoutState.INIT)
            case Failure(declined=True):
                self._move(CheckoutState.DECLINED_FINAL)
            case Failure():
                self._move(CheckoutState.ERROR)
        return outcome

    def _move(self, state: CheckoutState) -> None:
        log.info(
            "checkout.state",
            from_state=self.state.value,
            to_state=state.value,
            order_id=self.order_id,
        )
        self.state = state
