import logging

import streamlit as st

from fireguard_web import api, config
from fireguard_web.screens import admin_login, catalog, dashboard, enquiry, product_detail, sign_in, sign_up
from fireguard_web.session import ADMIN_KIND, USER_KIND, SessionLifecycle

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

# Set Streamlit page config
st.set_page_config(page_title="FireGuard Safety", page_icon="🧯", layout="wide")


def _session(kind: str, storage_key: str, notices: list) -> SessionLifecycle:
    lifecycle = SessionLifecycle(kind, st.session_state.tokens, storage_key)

    # Called from the timer thread: only touch the plain list
    def on_change(event: str):
        if event == "expired":
            notices.append(f"Your {kind} session has expired. Please sign in again.")

    lifecycle.on_change(on_change)
    return lifecycle


# Tokens and notices live in plain containers so the expiry timer thread can update them
if "tokens" not in st.session_state:
    st.session_state.tokens = {}
if "notices" not in st.session_state:
    st.session_state.notices = []
if "admin_session" not in st.session_state:
    st.session_state.admin_session = _session(ADMIN_KIND, config.ADMIN_TOKEN_KEY, st.session_state.notices)
if "user_session" not in st.session_state:
    st.session_state.user_session = _session(USER_KIND, config.USER_TOKEN_KEY, st.session_state.notices)

# Drop anything expired or malformed before rendering
st.session_state.admin_session.restore()
st.session_state.user_session.restore()

while st.session_state.notices:
    st.warning(st.session_state.notices.pop(0))

# Session state to track navigation
if "page" not in st.session_state:
    st.session_state.page = "catalog"

# Back from the Google redirect
sign_in.complete_google_sign_in()

# The server has the final say on the customer session
user_session = st.session_state.user_session
if user_session.is_authenticated and st.session_state.get("profile_token") != user_session.token:
    profile = api.get_current_user(user_session.token)
    if profile is None:
        user_session.logout()
    else:
        st.session_state.profile = profile
        st.session_state.profile_token = user_session.token

with st.sidebar:
    st.header("🔥 FireGuard")
    if st.button("Products"):
        st.session_state.page = "catalog"
        st.rerun()
    if st.button("Contact us"):
        st.session_state.page = "enquiry"
        st.rerun()

    if user_session.is_authenticated:
        profile = st.session_state.get("profile", {})
        st.caption(f"Signed in as {profile.get('name') or profile.get('email', '')}")
        if st.button("Sign out"):
            user_session.logout()
            st.session_state.pop("google_sub", None)
            if st.user.is_logged_in:
                st.logout()
            st.rerun()
    elif st.button("Sign in"):
        st.session_state.page = "sign_in"
        st.rerun()

    if st.button("Admin"):
        st.session_state.page = "dashboard" if st.session_state.admin_session.is_authenticated else "admin_login"
        st.rerun()

# Admin pages need a live admin session
if st.session_state.page == "dashboard" and not st.session_state.admin_session.is_authenticated:
    st.session_state.page = "admin_login"

# Router
if st.session_state.page == "catalog":
    catalog.show()
elif st.session_state.page == "product":
    product_detail.show()
elif st.session_state.page == "enquiry":
    enquiry.show()
elif st.session_state.page == "sign_in":
    sign_in.show()
elif st.session_state.page == "sign_up":
    sign_up.show()
elif st.session_state.page == "admin_login":
    admin_login.show()
elif st.session_state.page == "dashboard":
    dashboard.show()
