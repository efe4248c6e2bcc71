from typing import Optional

from loguru import logger

from .dispatch import PaymentDispatcher, SendPayment, StepUp
from .execution_queue import ExecutionQueue
from .settings import settings
from .store import RiskStateStore
from .tracker import PaymentRiskTracker


class WalletSession:
    """
    Owns the risk state of one wallet from unlock to teardown.
    Nothing here is module-global, two wallets never share history.
    """

    def __init__(self, wallet_id: str, state_path: Optional[str] = None):
        self.wallet_id = wallet_id
        self.tracker = PaymentRiskTracker()
        self.queue = ExecutionQueue()
        path = state_path or settings.state_path
        self.store: Optional[RiskStateStore] = RiskStateStore(path) if path else None

    async def start(self):
        if self.store:
            self.store.load_into(self.tracker)
        self.queue.start()
        logger.info(f"wallet session {self.wallet_id} started")

    async def stop(self):
        await self.queue.stop()
        self.tracker.reset()
        logger.info(f"wallet session {self.wallet_id} stopped")

    def dispatcher(self, send_payment: SendPayment, step_up: StepUp) -> PaymentDispatcher:
        return PaymentDispatcher(
            self.tracker, send_payment, step_up, queue=self.queue, store=self.store
        )
