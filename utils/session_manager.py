import logging
import re
import secrets

import streamlit as st
import streamlit.components.v1 as components

from use_cases import bootstrap
from use_cases.access_gate import AccessGate
from use_cases.navigation import HOME_PATH, normalize_path
from use_cases.session_store import SESSION_STORAGE_KEY

log = logging.getLogger(__name__)

BROWSER_COOKIE = "postboard_browser_id"
BROWSER_COOKIE_MAX_AGE = 60 * 60 * 24 * 365
BROWSER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{16,64}$")

"""
SESSION STATE CONTRACT

This module owns the per-browser-session objects kept in Streamlit's
st.session_state. Views receive them from here and never build their own.

app_context: AppContext | None
    composition root (session store, remote client, auth controller)
    default: None
    owner: session_manager

browser_id: str | None
    id from the postboard_browser_id cookie; names this browser's slot in local storage
    default: None
    owner: session_manager

route: str
    current client-side path ("/", "/login", "/register", "/dashboard", ...)
    default: ?page= query parameter or "/"
    owner: session_manager

post_manager: PostCollectionManager | None
    post list + draft for the signed-in user
    default: None
    owner: dashboard

access_gate: AccessGate | None
    guard subscribed to the session store while the dashboard is mounted
    default: None
    owner: dashboard

post_notice: str | None
    inline message shown next to the post form after a failed sync
    default: None
    owner: dashboard

post_form_nonce: int
    bumped to reset the post form widgets after a save
    default: 0
    owner: dashboard
"""


def init_session_state():
    if "app_context" not in st.session_state:
        st.session_state.app_context = None
    if "browser_id" not in st.session_state:
        st.session_state.browser_id = None
    if "route" not in st.session_state:
        st.session_state.route = normalize_path(st.query_params.get("page", HOME_PATH))
    if "post_manager" not in st.session_state:
        st.session_state.post_manager = None
    if "access_gate" not in st.session_state:
        st.session_state.access_gate = None
    if "post_notice" not in st.session_state:
        st.session_state.post_notice = None
    if "post_form_nonce" not in st.session_state:
        st.session_state.post_form_nonce = 0


def write_browser_cookie(browser_id: str):
    components.html(
        f"""
        <script>
          document.cookie = "{BROWSER_COOKIE}=" + encodeURIComponent("{browser_id}") + "; path=/; max-age={BROWSER_COOKIE_MAX_AGE}; SameSite=Lax";
        </script>
        """,
        height=0,
    )


def get_browser_id() -> str:
    """Id of the connected browser, minted and written to a cookie on its first visit."""
    if st.session_state.browser_id is None:
        try:
            browser_id = st.context.cookies.get(BROWSER_COOKIE)
        except Exception as e:
            # Headless runs have no request context
            log.warning(f"⚠️ Browser cookies unavailable: {e}")
            browser_id = None

        if not browser_id or not BROWSER_ID_PATTERN.match(browser_id):
            browser_id = secrets.token_urlsafe(24)
            write_browser_cookie(browser_id)
        st.session_state.browser_id = browser_id
    return st.session_state.browser_id


def browser_storage_key() -> str:
    return f"{SESSION_STORAGE_KEY}:{get_browser_id()}"


def get_context() -> bootstrap.AppContext:
    """Build the composition root and restore the session on the first run of this browser session."""
    if st.session_state.app_context is None:
        context = bootstrap.build_context(storage_key=browser_storage_key())
        bootstrap.run_startup(context)
        st.session_state.app_context = context
    return st.session_state.app_context


def current_path() -> str:
    return st.session_state.route


def set_route(path: str):
    path = normalize_path(path)
    st.session_state.route = path
    st.query_params["page"] = path


def navigate(path: str):
    set_route(path)
    st.rerun()


def get_post_manager():
    if st.session_state.post_manager is None:
        st.session_state.post_manager = get_context().new_post_manager()
    return st.session_state.post_manager


def get_access_gate() -> AccessGate:
    # Route changes only; the gate's subscription may fire mid-notification.
    if st.session_state.access_gate is None:
        st.session_state.access_gate = AccessGate(get_context().store, set_route)
    return st.session_state.access_gate


def logout():
    get_context().auth.logout(navigate)
