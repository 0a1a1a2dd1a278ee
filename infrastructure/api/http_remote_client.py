import logging
from typing import Any, Dict, Iterable, Optional

import requests

from infrastructure.api.remote_port import RemoteResponse

log = logging.getLogger(__name__)

# Exact wording the auth service uses for an unknown email.
USER_NOT_REGISTERED_MESSAGE = "User not registered"


class HttpRemoteClient:
    """
    requests-backed implementation of RemoteAccessPort.

    A single requests.Session is kept per client so the auth cookie set by
    /auth/login/ rides along on every post call.
    """

    def __init__(self, base_url: str, timeout: float = 10, http: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        expected: Iterable[int],
        payload: Optional[Dict[str, Any]] = None,
        needs_body: bool = True,
    ) -> RemoteResponse:
        try:
            resp = self._http.request(method, self._url(path), json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            log.error(f"❌ Network error on {method} {path}: {e}")
            return RemoteResponse(ok=False, message=str(e), error_code="network_error")

        try:
            body = resp.json()
        except ValueError:
            body = None
        message = body.get("message") if isinstance(body, dict) else None

        if resp.status_code not in tuple(expected):
            log.warning(f"⚠️ {method} {path} answered HTTP {resp.status_code}: {message}")
            error_code = "user_not_registered" if message == USER_NOT_REGISTERED_MESSAGE else "http_error"
            return RemoteResponse(
                ok=False,
                status_code=resp.status_code,
                data=body if isinstance(body, dict) else {},
                message=message,
                error_code=error_code,
            )

        if needs_body and not isinstance(body, dict):
            log.error(f"❌ {method} {path} answered HTTP {resp.status_code} without a JSON object body")
            return RemoteResponse(ok=False, status_code=resp.status_code, error_code="malformed_body")

        return RemoteResponse(
            ok=True,
            status_code=resp.status_code,
            data=body if isinstance(body, dict) else {},
            message=message,
        )

    def login(self, email: str, password: str) -> RemoteResponse:
        return self._request("POST", "/auth/login/", (200,), {"email": email, "password": password})

    def register(self, name: str, email: str, password: str) -> RemoteResponse:
        return self._request(
            "POST", "/auth/register/", (201,), {"name": name, "email": email, "password": password}
        )

    def logout(self) -> RemoteResponse:
        return self._request("GET", "/auth/logout/", range(200, 300), needs_body=False)

    def list_posts(self) -> RemoteResponse:
        return self._request("GET", "/post", (200,))

    def create_post(self, title: str, content: str) -> RemoteResponse:
        return self._request("POST", "/post", (200, 201), {"title": title, "content": content})

    def update_post(self, post_id: str, title: str, content: str) -> RemoteResponse:
        return self._request("PUT", f"/post/{post_id}", (200,), {"title": title, "content": content})

    def delete_post(self, post_id: str) -> RemoteResponse:
        return self._request("DELETE", f"/post/{post_id}", (200,), needs_body=False)

    def credentials(self) -> Dict[str, str]:
        """Snapshot of the service cookies this client currently holds."""
        return requests.utils.dict_from_cookiejar(self._http.cookies)

    def use_credentials(self, credentials: Dict[str, str]):
        """Replace the cookie jar, e.g. with cookies saved by an earlier process."""
        self._http.cookies.clear()
        requests.utils.add_dict_to_cookiejar(self._http.cookies, credentials)
