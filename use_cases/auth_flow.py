"""Authentication flow orchestration (application layer)."""

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from infrastructure.api.remote_port import RemoteAccessPort, RemoteResponse, call_safely
from use_cases.navigation import LOGIN_PATH
from use_cases.session_models import Identity
from use_cases.session_store import SessionStore

log = logging.getLogger(__name__)

AuthFailureReason = Literal["ok", "user_not_registered", "failed"]
Navigate = Callable[[str], None]

LOGIN_NOT_REGISTERED_MESSAGE = "User not registered."
LOGIN_FAILED_MESSAGE = "Login failed. Try again."
REGISTER_FAILED_MESSAGE = "Registration failed. Try again."


@dataclass(frozen=True)
class AuthResult:
    """Result contract for login/register."""

    success: bool
    identity: Optional[Identity] = None
    message: Optional[str] = None
    reason: AuthFailureReason = "failed"

    def login_error(self) -> str:
        if self.reason == "user_not_registered":
            return LOGIN_NOT_REGISTERED_MESSAGE
        return LOGIN_FAILED_MESSAGE

    def register_error(self) -> str:
        return self.message or REGISTER_FAILED_MESSAGE


class AuthController:
    def __init__(self, remote: RemoteAccessPort, store: SessionStore):
        self._remote = remote
        self._store = store

    def _accept(self, resp: RemoteResponse, field: str) -> AuthResult:
        try:
            identity = Identity.from_payload(resp.data.get(field))
        except ValueError as e:
            log.error(f"❌ Auth response has an unusable '{field}': {e}")
            return AuthResult(success=False, reason="failed")
        # Service cookies travel with the identity so a restored session can still call the service.
        self._store.set_identity(identity, credentials=self._remote.credentials())
        return AuthResult(success=True, identity=identity, message=resp.message, reason="ok")

    def login(self, email: str, password: str) -> AuthResult:
        resp = call_safely(self._remote.login, email, password)
        if not resp.ok:
            log.info(f"Login rejected (status={resp.status_code}, code={resp.error_code})")
            reason = "user_not_registered" if resp.error_code == "user_not_registered" else "failed"
            return AuthResult(success=False, message=resp.message, reason=reason)
        return self._accept(resp, "loggedInUser")

    def register(self, name: str, email: str, password: str) -> AuthResult:
        resp = call_safely(self._remote.register, name, email, password)
        if not resp.ok:
            log.info(f"Registration rejected (status={resp.status_code}, code={resp.error_code})")
            # Transport errors carry exception text, not a user message.
            message = resp.message if resp.status_code is not None else None
            return AuthResult(success=False, message=message, reason="failed")
        return self._accept(resp, "user")

    def logout(self, navigate: Navigate):
        """Best-effort remote logout; the local session is always dropped."""
        resp = call_safely(self._remote.logout)
        if not resp.ok:
            log.warning(f"⚠️ Remote logout failed (status={resp.status_code}, code={resp.error_code}), clearing local session anyway")
        self._store.clear()
        self._remote.use_credentials({})
        navigate(LOGIN_PATH)
