"""Guard evaluated before entering protected views."""

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from use_cases.navigation import LOGIN_PATH
from use_cases.session_models import Session
from use_cases.session_store import SessionStore

log = logging.getLogger(__name__)

GateStatus = Literal["PENDING", "ADMIT", "REDIRECT"]


@dataclass(frozen=True)
class GateDecision:
    status: GateStatus
    redirect_to: Optional[str] = None


def evaluate_access(session: Session) -> GateDecision:
    """PENDING while the session is still restoring, then ADMIT or REDIRECT."""
    if session.loading:
        return GateDecision(status="PENDING")
    if session.is_authenticated:
        return GateDecision(status="ADMIT")
    return GateDecision(status="REDIRECT", redirect_to=LOGIN_PATH)


class AccessGate:
    """
    Keeps a protected view honest while it is mounted.

    Re-evaluates on every session change and fires the redirect only once per
    logged-out stretch, so repeated notifications do not stack navigations.
    """

    def __init__(self, store: SessionStore, navigate: Callable[[str], None]):
        self._store = store
        self._navigate = navigate
        self._redirected = False
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.decision = GateDecision(status="PENDING")

    def mount(self) -> GateDecision:
        if self._unsubscribe is None:
            self._redirected = False
            self._unsubscribe = self._store.subscribe(self._on_session)
        return self.evaluate(self._store.session)

    def unmount(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def evaluate(self, session: Session) -> GateDecision:
        decision = evaluate_access(session)
        self.decision = decision
        if decision.status == "REDIRECT":
            if not self._redirected:
                self._redirected = True
                log.info(f"Access denied, redirecting to {decision.redirect_to}")
                self._navigate(decision.redirect_to)
        elif decision.status == "ADMIT":
            self._redirected = False
        return decision

    def _on_session(self, session: Session):
        self.evaluate(session)
