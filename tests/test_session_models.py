import pytest

from use_cases.session_models import Identity, PendingEdit, Post, Session


def test_identity_from_server_payload_accepts_mongo_id() -> None:
    identity = Identity.from_payload({"_id": "abc", "name": "Alice", "email": "a@b.com", "extra": 1})
    assert identity == Identity(id="abc", name="Alice", email="a@b.com")
    assert identity.to_payload() == {"id": "abc", "name": "Alice", "email": "a@b.com"}


def test_identity_from_payload_rejects_partial_record() -> None:
    with pytest.raises(ValueError):
        Identity.from_payload({"id": "abc", "name": "Alice"})
    with pytest.raises(ValueError):
        Identity.from_payload({"name": "Alice", "email": "a@b.com"})
    with pytest.raises(ValueError):
        Identity.from_payload(["not", "a", "dict"])


def test_post_from_payload() -> None:
    assert Post.from_payload({"_id": "p1", "title": "T", "content": "C"}) == Post(id="p1", title="T", content="C")
    assert Post.from_payload({"id": 7, "title": "T", "content": "C"}).id == "7"
    with pytest.raises(ValueError):
        Post.from_payload({"title": "no id"})
    with pytest.raises(ValueError):
        Post.from_payload(None)


def test_session_and_pending_edit_defaults() -> None:
    assert Session().loading is True
    assert Session(identity=None, loading=False).is_authenticated is False
    assert Session(identity=Identity("1", "n", "e"), loading=False).is_authenticated is True
    assert PendingEdit.blank().is_new is True
    assert PendingEdit(editing_id="p1", title="T", content="C").is_new is False
