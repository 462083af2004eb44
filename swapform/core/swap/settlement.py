"""
Simulated Settlement

Runs an accepted swap to completion after a fixed delay. The delay lives in
an asyncio task so other edits keep flowing while the swap is in flight;
the controller's in-flight flag rejects resubmission until the task ends.
"""

import asyncio
import logging
from typing import Optional

from ...config import settings
from .controller import SwapController
from .errors import SettlementError
from .models import SettlementReceipt, SettlementRequest


class SettlementSimulator:
    """
    Settles swaps for one controller.

    Features:
    - Single pending settlement per controller (guarded by ``in_flight``)
    - Completion after ``delay_seconds`` via an asyncio task
    - Cancellation, ``SettlementError`` and unexpected errors all land in the
      failed state, keeping the typed amounts for a retry
    """

    def __init__(
        self,
        controller: SwapController,
        delay_seconds: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.controller = controller
        self.delay_seconds = settings.settlement_delay_seconds if delay_seconds is None else delay_seconds
        self.logger = logger or logging.getLogger(__name__)
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def submit(self) -> "asyncio.Task[Optional[SettlementReceipt]]":
        """Accept the controller's current amounts and schedule settlement.

        Must be called from a running event loop.

        Raises:
            SubmissionRejected: If the controller refuses the submission
        """
        loop = asyncio.get_running_loop()
        request = self.controller.begin_submission()
        self.logger.info(
            f"Swap {self.controller.session_id}: settling {request.from_amount} "
            f"{request.from_asset.symbol} -> {request.to_amount} {request.to_asset.symbol} "
            f"in {self.delay_seconds}s"
        )
        self._task = loop.create_task(self._run(request))
        self._task.add_done_callback(lambda task: self._on_done(task, request))
        return self._task

    def cancel(self) -> bool:
        """Cancel the pending settlement, if any."""
        if not self.pending:
            return False
        self._task.cancel()
        return True

    async def wait(self) -> Optional[SettlementReceipt]:
        """Wait for the pending settlement and return its receipt, if it succeeded."""
        if self._task is None:
            return None
        try:
            return await self._task
        except asyncio.CancelledError:
            if self._task.cancelled():
                return None
            raise

    async def settle(self, request: SettlementRequest) -> None:
        """Perform the settlement. The simulation only waits."""
        await asyncio.sleep(self.delay_seconds)

    def _on_done(self, task: asyncio.Task, request: SettlementRequest) -> None:
        # A task cancelled before it started never reaches the handler in _run
        if task.cancelled() and self.controller.in_flight:
            self.controller.fail_settlement(request, "cancelled")

    async def _run(self, request: SettlementRequest) -> Optional[SettlementReceipt]:
        try:
            await self.settle(request)
        except SettlementError as e:
            self.logger.error(f"Swap {self.controller.session_id}: settlement failed: {e.message}")
            self.controller.fail_settlement(request, e.message)
            return None
        except asyncio.CancelledError:
            self.logger.warning(f"Swap {self.controller.session_id}: settlement cancelled")
            self.controller.fail_settlement(request, "cancelled")
            raise
        except Exception as e:
            self.logger.exception(f"Swap {self.controller.session_id}: settlement crashed")
            self.controller.fail_settlement(request, str(e) or type(e).__name__)
            raise

        receipt = self.controller.complete_settlement(request)
        self.logger.info(f"Swap {self.controller.session_id}: {receipt.message}")
        return receipt
