import sentry_sdk
import streamlit as st

from infrastructure.observability import setup_observability
setup_observability()

import ui
from use_cases.navigation import public_page_redirect, resolve_route
from utils import session_manager
from views import dashboard_view, login_view, not_found_view, register_view

# --- PAGE SETTINGS ---
st.set_page_config(page_title="Postboard", layout="centered", initial_sidebar_state="collapsed")

ui.setup_style()

# --- STARTUP ORCHESTRATION ---
# First run of a browser session wires the core and restores the persisted identity.
session_manager.init_session_state()
context = session_manager.get_context()
session = context.store.session

route = resolve_route(session_manager.current_path())

# --- ROUTING ---
if not route.is_protected and st.session_state.access_gate is not None:
    st.session_state.access_gate.unmount()

redirect = public_page_redirect(route, session)
if redirect:
    session_manager.navigate(redirect)

if route.name == "login":
    login_view.render_login_screen()
    st.stop()

if route.name == "register":
    register_view.render_register_screen()
    st.stop()

if route.name == "not_found":
    not_found_view.render_not_found()
    st.stop()

# --- PROTECTED: DASHBOARD ---
decision = session_manager.get_access_gate().mount()

if decision.status == "PENDING":
    st.caption("Restoring your session...")
    st.stop()

if decision.status == "REDIRECT":
    st.rerun()

sentry_sdk.set_user({"id": session.identity.id})

dashboard_view.render_dashboard(session.identity)
