import pytest

from infrastructure.api.remote_port import RemoteResponse
from use_cases.post_flow import (
    CREATE_FAILED_MESSAGE,
    DELETE_FAILED_MESSAGE,
    UPDATE_FAILED_MESSAGE,
    PostCollectionManager,
)
from use_cases.session_models import Identity, PendingEdit, Post

SERVER_POSTS = [
    {"_id": "p2", "title": "Second", "content": "two"},
    {"_id": "p3", "title": "Third", "content": "three"},
]


def _ok(**data):
    return RemoteResponse(ok=True, status_code=200, data=data)


def _server_error():
    return RemoteResponse(ok=False, status_code=500, error_code="http_error")


@pytest.fixture
def manager(remote, signed_in_store):
    remote.responses["list_posts"] = _ok(posts=SERVER_POSTS)
    manager = PostCollectionManager(remote, signed_in_store)
    manager.fetch_all()
    return manager


def _ids(manager):
    return [p.id for p in manager.posts]


# --- fetch ---

def test_starts_idle(remote, signed_in_store):
    manager = PostCollectionManager(remote, signed_in_store)
    assert manager.state == "idle"
    assert manager.posts == ()


def test_fetch_all_keeps_server_order(manager):
    assert manager.state == "ready"
    assert manager.mode == "viewing"
    assert _ids(manager) == ["p2", "p3"]


def test_fetch_all_is_idempotent(manager):
    first = manager.posts
    second = manager.fetch_all()
    assert first == second


def test_fetch_all_drops_duplicate_and_broken_entries(remote, signed_in_store):
    remote.responses["list_posts"] = _ok(posts=[
        {"_id": "p1", "title": "A", "content": "a"},
        {"title": "no id"},
        {"_id": "p1", "title": "A again", "content": "a"},
        {"_id": "p2", "title": "B", "content": "b"},
    ])
    manager = PostCollectionManager(remote, signed_in_store)

    manager.fetch_all()

    assert _ids(manager) == ["p1", "p2"]
    assert manager.get("p1").title == "A"


def test_fetch_failure_yields_empty_ready_state(remote, signed_in_store):
    remote.responses["list_posts"] = _server_error()
    manager = PostCollectionManager(remote, signed_in_store)

    assert manager.fetch_all() == ()
    assert manager.state == "ready"


def test_fetch_without_session_does_not_call_remote(remote, store):
    manager = PostCollectionManager(remote, store)
    manager.fetch_all()
    assert remote.calls == []
    assert manager.state == "idle"


def test_ensure_loaded_fetches_once(remote, signed_in_store):
    remote.responses["list_posts"] = _ok(posts=SERVER_POSTS)
    manager = PostCollectionManager(remote, signed_in_store)

    manager.ensure_loaded()
    manager.ensure_loaded()

    assert remote.ops() == ["list_posts"]


# --- create ---

def test_create_prepends_server_post_and_clears_draft(manager, remote):
    remote.responses["create_post"] = _ok(post={"id": "p1", "title": "T", "content": "C"})
    manager.begin_new()
    manager.set_draft("T", "C")

    result = manager.create("T", "C")

    assert result.success is True
    assert result.post == Post(id="p1", title="T", content="C")
    assert _ids(manager) == ["p1", "p2", "p3"]
    assert manager.pending_edit == PendingEdit.blank()
    assert manager.mode == "viewing"


def test_create_uses_server_id_not_a_placeholder(manager, remote):
    remote.responses["create_post"] = _ok(post={"_id": "srv-42", "title": "Hello", "content": "World"})

    manager.create("Hello", "World")

    created = manager.posts[0]
    assert created.id == "srv-42"
    assert (created.title, created.content) == ("Hello", "World")


def test_create_failure_leaves_collection_untouched(manager, remote):
    remote.responses["create_post"] = _server_error()
    manager.set_draft("T", "C")
    before = manager.posts

    result = manager.create("T", "C")

    assert result.success is False
    assert result.message == CREATE_FAILED_MESSAGE
    assert manager.posts == before
    assert manager.pending_edit.title == "T"


def test_create_with_malformed_body_is_failure(manager, remote):
    remote.responses["create_post"] = _ok(post={"title": "T"})
    before = manager.posts

    result = manager.create("T", "C")

    assert result.success is False
    assert manager.posts == before


def test_create_echoing_existing_id_does_not_duplicate(manager, remote):
    remote.responses["create_post"] = _ok(post={"_id": "p3", "title": "T", "content": "C"})

    manager.create("T", "C")

    assert _ids(manager) == ["p3", "p2"]


# --- update ---

def test_begin_edit_copies_post(manager):
    manager.begin_edit(manager.get("p3"))
    assert manager.pending_edit == PendingEdit(editing_id="p3", title="Third", content="three")
    assert manager.mode == "editing"


def test_update_replaces_by_id(manager, remote):
    remote.responses["update_post"] = _ok(updatedPost={"_id": "p3", "title": "Third!", "content": "3"})
    manager.begin_edit(manager.get("p3"))
    manager.set_draft("Third!", "3")

    result = manager.update()

    assert result.success is True
    assert remote.calls[-1] == ("update_post", ("p3", "Third!", "3"))
    assert _ids(manager) == ["p2", "p3"]
    assert manager.get("p3").title == "Third!"
    assert manager.pending_edit == PendingEdit.blank()
    assert manager.mode == "viewing"


def test_update_matches_by_id_after_reorder(manager, remote):
    manager.begin_edit(manager.get("p3"))

    def create_lands_first():
        # A create confirmed while the update is in flight shifts every index.
        manager._posts.insert(0, Post(id="p0", title="New", content="new"))

    remote.hooks["update_post"] = create_lands_first
    remote.responses["update_post"] = _ok(updatedPost={"_id": "p3", "title": "Edited", "content": "e"})

    manager.update()

    assert _ids(manager) == ["p0", "p2", "p3"]
    assert manager.get("p3").title == "Edited"
    assert manager.get("p2").title == "Second"


def test_update_failure_keeps_draft_for_retry(manager, remote):
    remote.responses["update_post"] = _server_error()
    manager.begin_edit(manager.get("p2"))
    manager.set_draft("changed", "body")
    before = manager.posts

    result = manager.update()

    assert result.success is False
    assert result.message == UPDATE_FAILED_MESSAGE
    assert manager.posts == before
    assert manager.pending_edit == PendingEdit(editing_id="p2", title="changed", content="body")
    assert manager.mode == "editing"


def test_update_without_editing_target_is_programmer_error(manager):
    with pytest.raises(ValueError):
        manager.update()

    manager.begin_edit(Post(id="ghost", title="x", content="y"))
    with pytest.raises(ValueError):
        manager.update()


# --- delete ---

def test_delete_removes_after_confirmation(manager, remote):
    remote.responses["delete_post"] = RemoteResponse(ok=True, status_code=200)

    result = manager.delete("p2")

    assert result.success is True
    assert _ids(manager) == ["p3"]


def test_delete_failure_keeps_post_and_surfaces_notice(remote, signed_in_store):
    remote.responses["list_posts"] = _ok(posts=[{"_id": "p1", "title": "T", "content": "C"}])
    remote.responses["delete_post"] = _server_error()
    manager = PostCollectionManager(remote, signed_in_store)
    manager.fetch_all()

    result = manager.delete("p1")

    assert result.success is False
    assert result.message == DELETE_FAILED_MESSAGE
    assert _ids(manager) == ["p1"]


def test_delete_of_post_being_edited_drops_draft(manager, remote):
    remote.responses["delete_post"] = RemoteResponse(ok=True, status_code=200)
    manager.begin_edit(manager.get("p2"))

    manager.delete("p2")

    assert manager.pending_edit == PendingEdit.blank()


def test_confirmed_sequence_matches_acknowledged_ids(manager, remote):
    remote.responses["create_post"] = _ok(post={"_id": "p4", "title": "Four", "content": "4"})
    manager.create("Four", "4")
    remote.responses["create_post"] = _ok(post={"_id": "p5", "title": "Five", "content": "5"})
    manager.create("Five", "5")
    remote.responses["delete_post"] = RemoteResponse(ok=True, status_code=200)
    manager.delete("p3")
    remote.responses["delete_post"] = _server_error()
    manager.delete("p4")

    assert _ids(manager) == ["p5", "p4", "p2"]
    assert len(set(_ids(manager))) == len(manager.posts)


# --- concurrency guards ---

def test_second_call_for_same_id_is_refused_while_in_flight(manager, remote):
    nested = []

    def try_again():
        nested.append(manager.delete("p2"))

    remote.hooks["delete_post"] = try_again
    remote.responses["delete_post"] = RemoteResponse(ok=True, status_code=200)

    result = manager.delete("p2")

    assert result.success is True
    assert nested[0].reason == "busy"
    assert remote.ops().count("delete_post") == 1
    assert not manager.is_pending("p2")


def test_logout_while_create_pending_discards_response(manager, remote, signed_in_store):
    remote.hooks["create_post"] = signed_in_store.clear
    remote.responses["create_post"] = _ok(post={"_id": "p1", "title": "T", "content": "C"})

    result = manager.create("T", "C")

    assert result.success is False
    assert result.reason == "stale"
    assert manager.posts == ()
    assert manager.state == "idle"


def test_response_for_previous_user_is_not_applied(manager, remote, signed_in_store):
    def switch_user():
        signed_in_store.set_identity(Identity(id="u2", name="Bob", email="bob@b.com"))

    remote.hooks["update_post"] = switch_user
    remote.responses["update_post"] = _ok(updatedPost={"_id": "p2", "title": "X", "content": "Y"})
    manager.begin_edit(manager.get("p2"))

    result = manager.update()

    assert result.reason == "stale"
    assert manager.get("p2") is None


def test_logout_clears_collection_and_draft(manager, signed_in_store):
    manager.begin_edit(manager.get("p2"))

    signed_in_store.clear()

    assert manager.posts == ()
    assert manager.pending_edit == PendingEdit.blank()
    assert manager.state == "idle"


def test_mutations_refused_without_session(remote, store):
    manager = PostCollectionManager(remote, store)

    assert manager.create("T", "C").reason == "no_session"
    assert manager.delete("p1").reason == "no_session"
    assert remote.calls == []


def test_cancel_edit_returns_to_viewing(manager):
    manager.begin_edit(manager.get("p2"))
    manager.set_draft("half typed", "")

    manager.cancel_edit()

    assert manager.pending_edit == PendingEdit.blank()
    assert manager.mode == "viewing"


def test_begin_new_enters_editing_without_target(manager):
    manager.begin_new()
    assert manager.mode == "editing"
    assert manager.pending_edit.is_new


def test_closed_manager_no_longer_follows_session(manager, signed_in_store):
    manager.close()

    signed_in_store.clear()

    assert _ids(manager) == ["p2", "p3"]


def test_update_answered_for_another_post_is_failure(manager, remote):
    remote.responses["update_post"] = _ok(updatedPost={"_id": "p2", "title": "X", "content": "Y"})
    manager.begin_edit(manager.get("p3"))
    manager.set_draft("Third!", "3")
    before = manager.posts

    result = manager.update()

    assert result.success is False
    assert result.reason == "failed"
    assert result.message == UPDATE_FAILED_MESSAGE
    assert manager.posts == before
    assert manager.pending_edit.editing_id == "p3"
