import streamlit as st

from infrastructure.api.api_client import ApiError
from utils import session_manager


def render_auth_screen(expired: bool = False):
    st.title("🔐 Procurement Dashboard")
    if expired:
        st.warning("Your session has expired. Please sign in again.")

    with st.form("login_form", clear_on_submit=False):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")
        if submitted:
            if not email.strip() or not password:
                st.error("Enter your email and password.")
                return
            try:
                session_manager.get_api_client().login(email.strip(), password)
            except ApiError as e:
                st.error(str(e))
                return
            st.rerun()
