import streamlit as st

from use_cases.form_validation import validate_login
from use_cases.navigation import DASHBOARD_PATH, REGISTER_PATH
from utils import session_manager


def render_login_screen():
    context = session_manager.get_context()

    st.title("Login")

    with st.form("login_form", clear_on_submit=False):
        email = st.text_input("Email", placeholder="Enter your email")
        password = st.text_input("Password", type="password", placeholder="Enter your password")
        submitted = st.form_submit_button("Login", type="primary", use_container_width=True)

    if submitted:
        errors = validate_login(email, password)
        if errors:
            for message in errors.values():
                st.error(message)
        else:
            result = context.auth.login(email.strip(), password)
            if result.success:
                session_manager.navigate(DASHBOARD_PATH)
            else:
                st.error(result.login_error())

    if st.button("Don't have an account? Register", use_container_width=True):
        session_manager.navigate(REGISTER_PATH)
