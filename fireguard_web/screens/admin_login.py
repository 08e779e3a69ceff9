import time

import streamlit as st

from fireguard_web import api


def show():
    st.title("🔐 Admin Login")

    email = st.text_input("Email")
    password = st.text_input("Password", type="password")

    if st.button("Login"):
        if not email or not password:
            st.warning("All fields are required.")
            return

        try:
            response = api.admin_login(email, password)
        except api.ApiError as e:
            st.error(f"Error: {e.message}")
            return

        # Replaces any previous session and its expiry timer
        st.session_state.admin_session.login(response["token"])
        st.success(response.get("message"))
        time.sleep(1)
        st.session_state.page = "dashboard"
        st.rerun()
