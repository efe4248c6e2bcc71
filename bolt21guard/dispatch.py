"""
Payment dispatch flow.

Order is fixed: validate -> classify -> amount -> evaluate risk ->
step-up if required -> send through the wallet SDK -> record on success.
The risk part runs inside the ExecutionQueue so two payments can't both
pass a threshold check only the first one should have passed.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

from bolt11 import decode as bolt11_decode
from loguru import logger

from .amount import parse_amount, parse_amount_result
from .execution_queue import ExecutionQueue
from .models import DispatchResult, PaymentType, RiskDecision
from .paranoia import assert_non_empty_string, assert_sane_string, assert_valid_sats
from .remediation import describe
from .store import RiskStateStore
from .tracker import PaymentRiskTracker
from .validator import classify, validate

SendPayment = Callable[[str, int], Awaitable[Optional[Dict]]]
StepUp = Callable[[RiskDecision], Awaitable[bool]]


class DispatchError(Exception):
    """
    Raised by the SDK glue when a payment didn't go through.
    status "failed" means nothing was sent, anything else means the outcome
    is unknown.
    """

    def __init__(self, message: str, status: str = "failed"):
        super().__init__(message)
        self.message = message
        self.status = status


def _error(code: str, message: str, **kwargs) -> DispatchResult:
    return DispatchResult(ok=False, error={"code": code, "message": message}, **kwargs)


class PaymentDispatcher:
    def __init__(
        self,
        tracker: PaymentRiskTracker,
        send_payment: SendPayment,
        step_up: StepUp,
        queue: Optional[ExecutionQueue] = None,
        store: Optional[RiskStateStore] = None,
        min_amount_sats: int = 1,
    ):
        self.tracker = tracker
        self.send_payment = send_payment
        self.step_up = step_up
        self.queue = queue or ExecutionQueue()
        self.store = store
        self.min_amount_sats = min_amount_sats

    def _invoice_amount(self, invoice: str) -> Optional[int]:
        """
        Amount in sats requested by a BOLT11 invoice, 0 for amountless ones,
        None if the invoice doesn't decode.
        """
        try:
            invoice_data = bolt11_decode(invoice)
        except Exception as e:
            logger.warning(f"dispatch: invoice does not decode: {e}")
            return None
        amount_msats = int(invoice_data.amount_msat or 0)
        # round msats up, never understate what leaves the wallet
        return parse_amount(-(-amount_msats // 1000))

    async def send(self, raw_destination: Any, amount_sats: Any = None) -> DispatchResult:
        outcome = validate(raw_destination)
        if not outcome.accepted:
            info = describe(outcome.reason)
            return _error("INVALID_INPUT", info["message"])
        destination = outcome.sanitized or ""
        if not destination or any(c.isspace() for c in destination):
            return _error("INVALID_INPUT", "Enter a single payment destination.")

        payment_type = classify(destination)
        if payment_type == PaymentType.UNKNOWN:
            return _error(
                "UNSUPPORTED_DESTINATION",
                "This is not an invoice, offer or bitcoin address.",
                payment_type=payment_type,
            )

        amount = 0
        if payment_type == PaymentType.BOLT11_INVOICE:
            invoice_amount = self._invoice_amount(destination)
            if invoice_amount is None:
                return _error(
                    "INVALID_INPUT",
                    "The invoice could not be read.",
                    payment_type=payment_type,
                )
            amount = invoice_amount
        if not amount and amount_sats is not None:
            result = parse_amount_result(amount_sats)
            if result.defaulted:
                return _error(
                    "INVALID_AMOUNT",
                    "The amount is not a whole number of sats.",
                    payment_type=payment_type,
                )
            amount = result.amount
        if amount < self.min_amount_sats:
            return _error(
                "INVALID_AMOUNT",
                f"The amount must be at least {self.min_amount_sats} sats.",
                payment_type=payment_type,
            )

        async def attempt() -> DispatchResult:
            decision = self.tracker.evaluate(amount)
            stepped_up = False
            if decision.requires_step_up:
                approved = await self.step_up(decision)
                if not approved:
                    logger.info("dispatch: step-up denied")
                    return _error(
                        "STEP_UP_DENIED",
                        "Authentication is required for this payment.",
                        amount_sats=amount,
                        payment_type=payment_type,
                        decision=decision,
                    )
                stepped_up = True

            # hardening #
            assert_non_empty_string(destination)
            assert_sane_string(destination)
            assert_valid_sats(amount)
            # ## #

            try:
                payment = await self.send_payment(destination, amount)
            except asyncio.CancelledError:
                # stopped mid-send, the payment may already be out
                logger.warning("dispatch: cancelled while sending, recording amount")
                self._record(amount)
                raise
            except DispatchError as e:
                if e.status == "failed":
                    logger.warning(f"dispatch: payment failed: {e.message}")
                    return _error(
                        "PAYMENT_FAILED",
                        e.message,
                        amount_sats=amount,
                        payment_type=payment_type,
                        decision=decision,
                        stepped_up=stepped_up,
                    )
                # outcome unknown, count it so risk is not understated
                self._record(amount)
                raise

            self._record(amount)
            return DispatchResult(
                ok=True,
                amount_sats=amount,
                payment_type=payment_type,
                decision=decision,
                stepped_up=stepped_up,
                payment=payment,
            )

        return await self.queue.enqueue(attempt)

    def _record(self, amount: int):
        self.tracker.record(amount)
        if self.store:
            self.store.save(self.tracker.snapshot())
