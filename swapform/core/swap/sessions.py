"""In-memory registry of swap form sessions served over HTTP."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
from uuid import uuid4

from ...config import settings
from .controller import SwapController
from .models import Asset
from .settlement import SettlementSimulator


@dataclass
class SwapSession:
    """One swap form and its settlement runner."""

    session_id: str
    controller: SwapController
    simulator: SettlementSimulator
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SwapSessionRegistry:
    """Sessions live in memory only and are never persisted.

    At most ``max_sessions`` are kept; creating one more evicts the oldest
    session without a pending settlement (or the oldest overall if every
    session is in flight).
    """

    def __init__(
        self,
        max_sessions: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.max_sessions = max_sessions or settings.max_sessions
        self._logger = logger or logging.getLogger(__name__)
        self._sessions: Dict[str, SwapSession] = {}

    def create(
        self,
        assets: Sequence[Asset],
        *,
        from_symbol: Optional[str] = None,
        to_symbol: Optional[str] = None,
        settlement_delay_seconds: Optional[float] = None,
    ) -> SwapSession:
        while len(self._sessions) >= self.max_sessions:
            self._evict_oldest()

        session_id = uuid4().hex[:12]
        controller = SwapController(
            assets,
            from_symbol=from_symbol,
            to_symbol=to_symbol,
            session_id=session_id,
        )
        simulator = SettlementSimulator(controller, delay_seconds=settlement_delay_seconds)
        session = SwapSession(session_id=session_id, controller=controller, simulator=simulator)
        self._sessions[session_id] = session
        self._logger.info(f"Swap session {session_id} created")
        return session

    def get(self, session_id: str) -> Optional[SwapSession]:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if session.simulator.cancel():
            self._logger.info(f"Swap session {session_id}: pending settlement cancelled")
        self._logger.info(f"Swap session {session_id} removed")
        return True

    def list_ids(self) -> List[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def _evict_oldest(self) -> None:
        idle = [s for s in self._sessions.values() if not s.simulator.pending]
        victim = idle[0] if idle else next(iter(self._sessions.values()))
        self._logger.info(f"Swap session {victim.session_id} evicted (limit {self.max_sessions})")
        self.remove(victim.session_id)


_registry: Optional[SwapSessionRegistry] = None


def get_session_registry() -> SwapSessionRegistry:
    global _registry
    if _registry is None:
        _registry = SwapSessionRegistry()
    return _registry
