"""
Owner of the client's authenticated identity.

The store keeps exactly one Identity or none, mirrors it to durable local
storage under a single key, and pushes every change to its subscribers.
"""

import json
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Protocol

from use_cases.session_models import Identity, Session

log = logging.getLogger(__name__)

SESSION_STORAGE_KEY = "user"

SessionListener = Callable[[Session], None]


def _parse_credentials(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    return {str(name): str(value) for name, value in raw.items()}


class LocalStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class SessionStore:
    def __init__(self, storage: LocalStorage, key: str = SESSION_STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._identity: Optional[Identity] = None
        self._credentials: Dict[str, str] = {}
        self._loading = True
        self._restored = False
        self._generation = 0
        self._listeners: List[SessionListener] = []
        self._lock = threading.RLock()

    @property
    def session(self) -> Session:
        return Session(identity=self._identity, loading=self._loading)

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def credentials(self) -> Dict[str, str]:
        """Service cookies saved with the identity; empty when the record carried none."""
        return dict(self._credentials)

    @property
    def generation(self) -> int:
        """Bumped on every identity change; lets callers detect that their session ended."""
        return self._generation

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def restore(self) -> Session:
        """
        Load the persisted identity. Runs once per process; a corrupt record
        is dropped and the session comes up logged out.
        """
        with self._lock:
            if self._restored:
                raise RuntimeError("SessionStore.restore() must run exactly once")
            self._restored = True

            identity = None
            credentials: Dict[str, str] = {}
            try:
                raw = self._storage.get_item(self._key)
                if raw:
                    record = json.loads(raw)
                    identity = Identity.from_payload(record)
                    credentials = _parse_credentials(record.get("credentials"))
            except ValueError as e:
                # json.JSONDecodeError is a ValueError too.
                log.warning(f"⚠️ Persisted session under '{self._key}' is corrupt, starting logged out: {e}")
                self._erase_persisted()
            except Exception as e:
                log.error(f"❌ Could not read persisted session: {e}")

            self._identity = identity
            self._credentials = credentials if identity is not None else {}
            self._loading = False
            if identity is not None:
                log.info(f"Restored session for user {identity.id}")
        self._notify()
        return self.session

    def set_identity(self, identity: Identity, credentials: Optional[Dict[str, str]] = None):
        with self._lock:
            self._identity = identity
            self._credentials = dict(credentials or {})
            self._loading = False
            self._generation += 1
            try:
                record: Dict[str, Any] = identity.to_payload()
                if self._credentials:
                    record["credentials"] = self._credentials
                self._storage.set_item(self._key, json.dumps(record))
            except Exception as e:
                log.error(f"❌ Could not persist session for user {identity.id}: {e}")
        self._notify()

    def clear(self):
        with self._lock:
            self._identity = None
            self._credentials = {}
            self._loading = False
            self._generation += 1
            self._erase_persisted()
        self._notify()

    def _erase_persisted(self):
        try:
            self._storage.remove_item(self._key)
        except Exception as e:
            log.error(f"❌ Could not erase persisted session: {e}")

    def _notify(self):
        session = self.session
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(session)
            except Exception:
                log.exception("Session listener failed")
