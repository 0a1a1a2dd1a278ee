import json

import pytest

from infrastructure.api.remote_port import RemoteResponse
from use_cases.session_models import Identity
from use_cases.session_store import SESSION_STORAGE_KEY, SessionStore


class InMemoryLocalStorage:
    def __init__(self, items=None):
        self.items = dict(items or {})

    def get_item(self, key):
        return self.items.get(key)

    def set_item(self, key, value):
        self.items[key] = value

    def remove_item(self, key):
        self.items.pop(key, None)


class FakeRemote:
    """
    Scriptable RemoteAccessPort. Set `responses[op]` to a RemoteResponse, and
    optionally `hooks[op]` to a callable run before the response is returned
    (used to simulate things happening while the call is in flight).
    """

    def __init__(self):
        self.responses = {}
        self.hooks = {}
        self.calls = []
        self.cookies = {}

    def _answer(self, op, *args):
        self.calls.append((op, args))
        hook = self.hooks.get(op)
        if hook is not None:
            hook()
        return self.responses.get(op, RemoteResponse(ok=False, status_code=500, error_code="http_error"))

    def login(self, email, password):
        return self._answer("login", email, password)

    def register(self, name, email, password):
        return self._answer("register", name, email, password)

    def logout(self):
        return self._answer("logout")

    def list_posts(self):
        return self._answer("list_posts")

    def create_post(self, title, content):
        return self._answer("create_post", title, content)

    def update_post(self, post_id, title, content):
        return self._answer("update_post", post_id, title, content)

    def delete_post(self, post_id):
        return self._answer("delete_post", post_id)

    def credentials(self):
        return dict(self.cookies)

    def use_credentials(self, credentials):
        self.cookies = dict(credentials)

    def ops(self):
        return [op for op, _ in self.calls]


@pytest.fixture
def storage():
    return InMemoryLocalStorage()


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def remote_factory():
    return FakeRemote


@pytest.fixture
def identity():
    return Identity(id="u1", name="Alice", email="a@b.com")


@pytest.fixture
def store(storage):
    store = SessionStore(storage)
    store.restore()
    return store


@pytest.fixture
def signed_in_store(storage, identity):
    storage.set_item(SESSION_STORAGE_KEY, json.dumps(identity.to_payload()))
    store = SessionStore(storage)
    store.restore()
    return store
