"""
Post collection orchestration for the dashboard.

The manager owns the signed-in user's post list and the single draft buffer.
Every mutation is confirm-then-apply: the list only changes once the service
has acknowledged the call, and responses are merged back by post id.

Each call remembers the SessionStore generation it was issued under. If the
session ends (logout, or a different login) before the response is applied,
the response is dropped instead of leaking into the next session.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Literal, Optional, Set, Tuple

from infrastructure.api.remote_port import RemoteAccessPort, call_safely
from use_cases.session_models import PendingEdit, Post, Session
from use_cases.session_store import SessionStore

log = logging.getLogger(__name__)

CollectionState = Literal["idle", "loading", "ready"]
ViewMode = Literal["viewing", "editing"]
SyncReason = Literal["ok", "failed", "stale", "busy", "no_session"]

CREATE_FAILED_MESSAGE = "Failed to create post."
UPDATE_FAILED_MESSAGE = "Failed to update post."
DELETE_FAILED_MESSAGE = "Failed to delete post."
BUSY_MESSAGE = "This post is still being saved."

# In-flight key for a create; a post has no id until the service assigns one.
NEW_POST_KEY = "__new__"


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a create/update/delete call."""

    success: bool
    post: Optional[Post] = None
    message: Optional[str] = None
    reason: SyncReason = "ok"


def dedupe_posts(posts: List[Post]) -> List[Post]:
    """Drop repeated ids, keeping the first occurrence and the incoming order."""
    seen: Set[str] = set()
    unique = []
    for post in posts:
        if post.id in seen:
            log.warning(f"⚠️ Duplicate post id {post.id} in server list, keeping the first one")
            continue
        seen.add(post.id)
        unique.append(post)
    return unique


class PostCollectionManager:
    def __init__(self, remote: RemoteAccessPort, store: SessionStore):
        self._remote = remote
        self._store = store
        self._posts: List[Post] = []
        self._pending = PendingEdit.blank()
        self._editing = False
        self._state: CollectionState = "idle"
        self._owner_generation = store.generation
        self._in_flight: Set[str] = set()
        self._unsubscribe: Optional[Callable[[], None]] = store.subscribe(self._on_session)

    # --- read side ---

    @property
    def posts(self) -> Tuple[Post, ...]:
        return tuple(self._posts)

    @property
    def pending_edit(self) -> PendingEdit:
        return self._pending

    @property
    def state(self) -> CollectionState:
        return self._state

    @property
    def mode(self) -> ViewMode:
        return "editing" if self._editing else "viewing"

    def is_pending(self, post_id: str) -> bool:
        return post_id in self._in_flight

    def get(self, post_id: str) -> Optional[Post]:
        for post in self._posts:
            if post.id == post_id:
                return post
        return None

    # --- session binding ---

    def _on_session(self, session: Session):
        if session.identity is None or self._store.generation != self._owner_generation:
            self.reset()

    def reset(self):
        """Forget everything tied to the previous session."""
        self._posts = []
        self._pending = PendingEdit.blank()
        self._editing = False
        self._state = "idle"
        self._in_flight.clear()

    def close(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _ticket(self) -> Optional[int]:
        if self._store.identity is None:
            return None
        return self._store.generation

    def _is_current(self, ticket: int) -> bool:
        return self._store.identity is not None and self._store.generation == ticket

    # --- list ---

    def ensure_loaded(self) -> Tuple[Post, ...]:
        """Fetch once when the dashboard first becomes ready."""
        if self._state == "idle":
            self.fetch_all()
        return self.posts

    def fetch_all(self) -> Tuple[Post, ...]:
        ticket = self._ticket()
        if ticket is None:
            log.warning("⚠️ fetch_all called without a signed-in user")
            return self.posts

        self._owner_generation = ticket
        self._state = "loading"
        resp = call_safely(self._remote.list_posts)
        if not self._is_current(ticket):
            log.info("Dropping post list that arrived after the session changed")
            return self.posts

        posts: List[Post] = []
        if not resp.ok:
            log.error(f"❌ Error fetching posts (status={resp.status_code}, code={resp.error_code})")
        else:
            raw_posts = resp.data.get("posts")
            if not isinstance(raw_posts, list):
                log.error(f"❌ Post list payload is not a list: {type(raw_posts).__name__}")
                raw_posts = []
            for raw in raw_posts:
                try:
                    posts.append(Post.from_payload(raw))
                except ValueError as e:
                    log.warning(f"⚠️ Skipping unusable post in list: {e}")

        self._posts = dedupe_posts(posts)
        self._state = "ready"
        return self.posts

    # --- draft buffer ---

    def begin_new(self):
        self._pending = PendingEdit.blank()
        self._editing = True

    def begin_edit(self, post: Post):
        self._pending = PendingEdit(editing_id=post.id, title=post.title, content=post.content)
        self._editing = True

    def set_draft(self, title: str, content: str):
        self._pending = PendingEdit(editing_id=self._pending.editing_id, title=title, content=content)
        self._editing = True

    def cancel_edit(self):
        self._pending = PendingEdit.blank()
        self._editing = False

    def _finish_edit(self, editing_id: Optional[str]):
        # The user may have moved on to another draft while the call was in flight.
        if self._pending.editing_id == editing_id:
            self.cancel_edit()

    # --- mutations ---

    def _begin_call(self, key: str) -> Optional[SyncResult]:
        if self._ticket() is None:
            return SyncResult(success=False, message="You are signed out.", reason="no_session")
        if key in self._in_flight:
            return SyncResult(success=False, message=BUSY_MESSAGE, reason="busy")
        return None

    def create(self, title: str, content: str) -> SyncResult:
        refused = self._begin_call(NEW_POST_KEY)
        if refused is not None:
            return refused
        ticket = self._ticket()

        self._in_flight.add(NEW_POST_KEY)
        try:
            resp = call_safely(self._remote.create_post, title, content)
        finally:
            self._in_flight.discard(NEW_POST_KEY)

        if not self._is_current(ticket):
            log.info("Dropping create response that arrived after the session changed")
            return SyncResult(success=False, reason="stale")
        if not resp.ok:
            log.error(f"❌ Create post failed (status={resp.status_code}, code={resp.error_code})")
            return SyncResult(success=False, message=CREATE_FAILED_MESSAGE, reason="failed")
        try:
            post = Post.from_payload(resp.data.get("post"))
        except ValueError as e:
            log.error(f"❌ Create post response is unusable: {e}")
            return SyncResult(success=False, message=CREATE_FAILED_MESSAGE, reason="failed")

        self._posts = [post] + [p for p in self._posts if p.id != post.id]
        self._finish_edit(None)
        log.info(f"Created post {post.id}")
        return SyncResult(success=True, post=post)

    def update(self) -> SyncResult:
        """
        Save the draft over the post it was opened from.

        Raises ValueError when the draft is not editing a post that is in the
        collection; that is a caller bug, not a sync failure.
        """
        draft = self._pending
        if draft.editing_id is None:
            raise ValueError("update() needs a draft opened with begin_edit()")
        if self.get(draft.editing_id) is None:
            raise ValueError(f"post {draft.editing_id} is not in the collection")

        refused = self._begin_call(draft.editing_id)
        if refused is not None:
            return refused
        ticket = self._ticket()

        self._in_flight.add(draft.editing_id)
        try:
            resp = call_safely(self._remote.update_post, draft.editing_id, draft.title, draft.content)
        finally:
            self._in_flight.discard(draft.editing_id)

        if not self._is_current(ticket):
            log.info("Dropping update response that arrived after the session changed")
            return SyncResult(success=False, reason="stale")
        if not resp.ok:
            log.error(f"❌ Update of post {draft.editing_id} failed (status={resp.status_code}, code={resp.error_code})")
            return SyncResult(success=False, message=UPDATE_FAILED_MESSAGE, reason="failed")
        try:
            updated = Post.from_payload(resp.data.get("updatedPost"))
        except ValueError as e:
            log.error(f"❌ Update response for post {draft.editing_id} is unusable: {e}")
            return SyncResult(success=False, message=UPDATE_FAILED_MESSAGE, reason="failed")
        if updated.id != draft.editing_id:
            log.error(f"❌ Update of post {draft.editing_id} answered with post {updated.id}")
            return SyncResult(success=False, message=UPDATE_FAILED_MESSAGE, reason="failed")

        self._posts = [updated if p.id == updated.id else p for p in self._posts]
        self._finish_edit(draft.editing_id)
        return SyncResult(success=True, post=updated)

    def delete(self, post_id: str) -> SyncResult:
        refused = self._begin_call(post_id)
        if refused is not None:
            return refused
        ticket = self._ticket()

        self._in_flight.add(post_id)
        try:
            resp = call_safely(self._remote.delete_post, post_id)
        finally:
            self._in_flight.discard(post_id)

        if not self._is_current(ticket):
            log.info("Dropping delete response that arrived after the session changed")
            return SyncResult(success=False, reason="stale")
        if not resp.ok:
            log.error(f"❌ Delete of post {post_id} failed (status={resp.status_code}, code={resp.error_code})")
            return SyncResult(success=False, message=DELETE_FAILED_MESSAGE, reason="failed")

        removed = self.get(post_id)
        self._posts = [p for p in self._posts if p.id != post_id]
        if self._pending.editing_id == post_id:
            self.cancel_edit()
        return SyncResult(success=True, post=removed)
