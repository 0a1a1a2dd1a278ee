"""Startup orchestration: wire the client core and restore the persisted session."""

import logging
import sqlite3
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

import config
from infrastructure.api.http_remote_client import HttpRemoteClient
from infrastructure.api.remote_port import RemoteAccessPort
from infrastructure.repositories.sqlite_local_storage import SQLiteLocalStorage
from use_cases.auth_flow import AuthController
from use_cases.post_flow import PostCollectionManager
from use_cases.session_store import SESSION_STORAGE_KEY, LocalStorage, SessionStore

log = logging.getLogger(__name__)

StartupStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class AppContext:
    """Composition root handed to every view; nothing below reads globals."""

    storage: LocalStorage
    store: SessionStore
    remote: RemoteAccessPort
    auth: AuthController

    def new_post_manager(self) -> PostCollectionManager:
        return PostCollectionManager(self.remote, self.store)


@dataclass(frozen=True)
class StartupResult:
    """Result contract for startup/bootstrap orchestration."""

    status: StartupStatus
    planned_steps: Tuple[str, ...]


def build_context(
    remote: Optional[RemoteAccessPort] = None,
    storage: Optional[LocalStorage] = None,
    storage_key: str = SESSION_STORAGE_KEY,
) -> AppContext:
    """
    Wire the core for one browser. `storage_key` names that browser's slot in
    the shared storage, so two browsers never restore each other's session.
    """
    if remote is None:
        remote = HttpRemoteClient(config.get_api_url(), timeout=config.get_request_timeout())
    if storage is None:
        storage = SQLiteLocalStorage(config.get_storage_db())
    store = SessionStore(storage, storage_key)
    return AppContext(storage=storage, store=store, remote=remote, auth=AuthController(remote, store))


def run_startup(context: AppContext) -> StartupResult:
    """Prepare durable storage, then restore the session exactly once."""
    executed_steps = []

    storage = context.storage
    if isinstance(storage, SQLiteLocalStorage):
        try:
            storage.init_storage()
            executed_steps.append("init_storage")
        except (RuntimeError, sqlite3.Error) as e:
            # Restore still runs and fails open to a logged-out session.
            log.error(f"❌ {e}")
            executed_steps.append("init_storage_failed")

    context.store.restore()
    executed_steps.append("restore_session")

    identity = context.store.identity
    if identity is not None:
        credentials = context.store.credentials
        if credentials:
            context.remote.use_credentials(credentials)
            executed_steps.append("restore_credentials")
        else:
            # The service would reject every call; start logged out instead.
            log.warning(f"⚠️ Restored session for user {identity.id} has no service credentials, signing out")
            context.store.clear()
            executed_steps.append("drop_uncredentialed_session")

    return StartupResult(status="CONTINUE", planned_steps=tuple(executed_steps))
