"""Application layer contracts for orchestrating high-level flows."""

from .access_gate import AccessGate, GateDecision, GateStatus, evaluate_access
from .auth_flow import AuthController, AuthFailureReason, AuthResult
from .bootstrap import AppContext, StartupResult, StartupStatus, build_context, run_startup
from .navigation import ResolvedRoute, public_page_redirect, resolve_route
from .post_flow import PostCollectionManager, SyncResult
from .session_models import Identity, PendingEdit, Post, Session
from .session_store import SESSION_STORAGE_KEY, LocalStorage, SessionStore

__all__ = [
    "AccessGate",
    "AppContext",
    "AuthController",
    "AuthFailureReason",
    "AuthResult",
    "GateDecision",
    "GateStatus",
    "Identity",
    "LocalStorage",
    "PendingEdit",
    "Post",
    "PostCollectionManager",
    "ResolvedRoute",
    "Session",
    "StartupResult",
    "StartupStatus",
    "SESSION_STORAGE_KEY",
    "SessionStore",
    "SyncResult",
    "build_context",
    "evaluate_access",
    "public_page_redirect",
    "resolve_route",
    "run_startup",
]
