import re
import time

import streamlit as st

from fireguard_web import api

EMAIL_REGEX = r"^[\w\.-]+@[\w\.-]+\.\w+$"
MIN_PASSWORD_LENGTH = 6


def show():
    st.title("📝 Create an account")

    name = st.text_input("Name")
    email = st.text_input("Email")
    password = st.text_input("Password", type="password")
    confirm = st.text_input("Confirm password", type="password")

    if st.button("Sign up", key="sign_up_submit"):
        # 1. Empty fields
        if not name or not email or not password:
            st.warning("All fields are required.")

        # 2. Email format check
        elif not re.match(EMAIL_REGEX, email):
            st.warning("Enter a valid email (e.g., name@example.com).")

        # 3. Password checks
        elif len(password) < MIN_PASSWORD_LENGTH:
            st.warning(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
        elif password != confirm:
            st.warning("Passwords do not match.")

        else:
            try:
                response = api.user_register(name, email, password)
            except api.ApiError as e:
                st.error(f"Error: {e.message}")
            else:
                st.session_state.user_session.login(response["token"])
                st.success(response.get("message"))
                time.sleep(1)
                st.session_state.page = "catalog"
                st.rerun()

    if st.button("Back to sign in"):
        st.session_state.page = "sign_in"
        st.rerun()
