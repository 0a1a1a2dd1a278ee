"""
Boundary to the backing post service.

Every operation answers with a RemoteResponse instead of raising, so callers
in the application layer only ever branch on values.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Protocol

log = logging.getLogger(__name__)

ErrorCode = Literal[
    "network_error",
    "http_error",
    "malformed_body",
    "user_not_registered",
]


@dataclass(frozen=True)
class RemoteResponse:
    ok: bool
    status_code: Optional[int] = None
    data: Dict[str, Any] = field(default_factory=dict)
    message: Optional[str] = None
    error_code: Optional[ErrorCode] = None


class RemoteAccessPort(Protocol):
    def login(self, email: str, password: str) -> RemoteResponse: ...

    def register(self, name: str, email: str, password: str) -> RemoteResponse: ...

    def logout(self) -> RemoteResponse: ...

    def list_posts(self) -> RemoteResponse: ...

    def create_post(self, title: str, content: str) -> RemoteResponse: ...

    def update_post(self, post_id: str, title: str, content: str) -> RemoteResponse: ...

    def delete_post(self, post_id: str) -> RemoteResponse: ...

    def credentials(self) -> Dict[str, str]: ...

    def use_credentials(self, credentials: Dict[str, str]) -> None: ...


def call_safely(operation, *args) -> RemoteResponse:
    """Invoke a port operation, turning any stray exception into a network_error response."""
    try:
        return operation(*args)
    except Exception as e:
        log.exception(f"Remote call {getattr(operation, '__name__', operation)} raised")
        return RemoteResponse(ok=False, message=str(e), error_code="network_error")
