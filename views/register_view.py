import streamlit as st

from use_cases.form_validation import validate_register
from use_cases.navigation import DASHBOARD_PATH, LOGIN_PATH
from utils import session_manager


def render_register_screen():
    context = session_manager.get_context()

    st.title("Register")

    with st.form("register_form", clear_on_submit=False):
        name = st.text_input("Name", placeholder="Enter your name")
        email = st.text_input("Email", placeholder="Enter your email")
        password = st.text_input("Password", type="password", placeholder="Enter your password")
        confirm_password = st.text_input("Confirm Password", type="password", placeholder="Confirm your password")
        submitted = st.form_submit_button("Register", type="primary", use_container_width=True)

    if submitted:
        errors = validate_register(name, email, password, confirm_password)
        if errors:
            for message in errors.values():
                st.error(message)
        else:
            result = context.auth.register(name.strip(), email.strip(), password)
            if result.success:
                session_manager.navigate(DASHBOARD_PATH)
            else:
                st.error(result.register_error())

    if st.button("Already have an account? Login", use_container_width=True):
        session_manager.navigate(LOGIN_PATH)
