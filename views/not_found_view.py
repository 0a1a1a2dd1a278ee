import streamlit as st

from use_cases.navigation import HOME_PATH
from utils import session_manager


def render_not_found():
    st.title("404")
    st.subheader("Page Not Found")
    st.caption("Sorry, the page you are looking for does not exist.")
    if st.button("Go to Home", type="primary"):
        session_manager.navigate(HOME_PATH)
