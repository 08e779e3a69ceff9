import time

import streamlit as st

from fireguard_web import api


def complete_google_sign_in():
    """Trade the Google identity from st.login for a FireGuard session token.

    Runs on every script run; does nothing unless the browser came back from
    Google and the customer session is not signed in yet.
    """
    if not st.user.is_logged_in or st.session_state.user_session.is_authenticated:
        return
    # One attempt per Google identity
    if st.session_state.get("google_sub") == st.user.sub:
        return
    st.session_state.google_sub = st.user.sub

    try:
        response = api.user_google(st.user.get("name") or st.user.email, st.user.email, st.user.sub)
    except api.ApiError as e:
        st.error(f"Google sign-in failed: {e.message}")
        return

    st.session_state.user_session.login(response["token"])
    st.session_state.page = "catalog"


def show():
    st.title("Sign in")

    email = st.text_input("Email")
    password = st.text_input("Password", type="password")

    if st.button("Sign in", key="sign_in_submit"):
        if not email or not password:
            st.warning("All fields are required.")
        else:
            try:
                response = api.user_login(email, password)
            except api.ApiError as e:
                st.error(f"Error: {e.message}")
            else:
                st.session_state.user_session.login(response["token"])
                st.success(response.get("message"))
                time.sleep(1)
                st.session_state.page = "catalog"
                st.rerun()

    # Google OIDC provider is configured under [auth.google] in .streamlit/secrets.toml
    if st.button("Continue with Google"):
        st.login("google")

    st.markdown("---")

    # Navigate to register screen
    if st.button("Create an account"):
        st.session_state.page = "sign_up"
        st.rerun()
