"""
Sessions boutique en mémoire: une par utilisateur authentifié, avec son panier
(chargé depuis Redis à l'ouverture) et son orchestrateur de checkout.
Les sessions vivent dans le processus; un déploiement multi-workers doit
router un utilisateur vers un même worker.

- get() est appelé depuis le threadpool (dépendance FastAPI synchrone):
  création protégée par un verrou, une seule session par utilisateur.
- Éviction: une session inactive depuis idle_seconds est retirée si son
  checkout est au repos (Idle / OrderWritten) et son panier bien persisté.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional
import logging
import threading
import time

from boutique.cart.store import CartStore
from boutique.checkout.orchestrator import CheckoutOrchestrator
from boutique.checkout.state import CheckoutPhase

logger = logging.getLogger(__name__)

EVICTABLE_PHASES = frozenset({CheckoutPhase.IDLE, CheckoutPhase.ORDER_WRITTEN})


@dataclass
class ShopSession:
    user_id: str
    cart: CartStore
    checkout: CheckoutOrchestrator
    last_seen: float = field(default=0.0)

    def is_evictable(self) -> bool:
        return (
            self.checkout.state.phase in EVICTABLE_PHASES
            and not self.checkout.finalizing
            and not self.cart.persist_failed
        )


class SessionRegistry:
    def __init__(
        self,
        factory: Callable[[str], ShopSession],
        idle_seconds: float = 1800,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._factory = factory
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._sessions: Dict[str, ShopSession] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> ShopSession:
        with self._lock:
            now = self._clock()
            self._evict_idle(now, keep=user_id)
            session = self._sessions.get(user_id)
            if session is None:
                session = self._factory(user_id)
                self._sessions[user_id] = session
            session.last_seen = now
            return session

    def peek(self, user_id: str) -> Optional[ShopSession]:
        with self._lock:
            return self._sessions.get(user_id)

    def evict_idle(self) -> int:
        with self._lock:
            return self._evict_idle(self._clock())

    def _evict_idle(self, now: float, keep: Optional[str] = None) -> int:
        expired = [
            uid for uid, s in self._sessions.items()
            if uid != keep and now - s.last_seen >= self._idle_seconds and s.is_evictable()
        ]
        for uid in expired:
            del self._sessions[uid]
        if expired:
            logger.info("sessions: %s session(s) inactive(s) retirée(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
