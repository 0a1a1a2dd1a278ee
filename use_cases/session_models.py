"""Session and post DTOs shared across application layers."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


def _payload_id(payload: Dict[str, Any]) -> str:
    # The service is Mongo-backed and answers with "_id"; persisted records use "id".
    raw = payload.get("_id", payload.get("id"))
    if raw is None or raw == "":
        raise ValueError("payload has no id")
    return str(raw)


@dataclass(frozen=True)
class Identity:
    id: str
    name: str
    email: str

    @classmethod
    def from_payload(cls, payload: Any) -> "Identity":
        """Build an Identity from a server or persisted record.

        Raises ValueError when the record is not a mapping or misses a field.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"identity payload must be an object, got {type(payload).__name__}")
        try:
            return cls(id=_payload_id(payload), name=str(payload["name"]), email=str(payload["email"]))
        except KeyError as e:
            raise ValueError(f"identity payload is missing {e}") from e

    def to_payload(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class Session:
    identity: Optional[Identity] = None
    loading: bool = True

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None


@dataclass(frozen=True)
class Post:
    id: str
    title: str
    content: str

    @classmethod
    def from_payload(cls, payload: Any) -> "Post":
        if not isinstance(payload, dict):
            raise ValueError(f"post payload must be an object, got {type(payload).__name__}")
        return cls(
            id=_payload_id(payload),
            title=str(payload.get("title", "")),
            content=str(payload.get("content", "")),
        )


@dataclass(frozen=True)
class PendingEdit:
    """Draft buffer for the post form. editing_id=None means a new post."""

    editing_id: Optional[str] = None
    title: str = ""
    content: str = ""

    @classmethod
    def blank(cls) -> "PendingEdit":
        return cls()

    @property
    def is_new(self) -> bool:
        return self.editing_id is None
