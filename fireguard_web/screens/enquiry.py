import re

import streamlit as st

from fireguard_web import api

EMAIL_REGEX = r"^[\w\.-]+@[\w\.-]+\.\w+$"
PHONE_REGEX = r"^[6-9][0-9]{9}$"
NOTES_MAX_LENGTH = 500


def show():
    st.title("📨 Request a Quote")

    name = st.text_input("Name")
    company = st.text_input("Company (optional)")
    email = st.text_input("Email")
    phone = st.text_input("Phone (10 digits)")
    product_interest = st.text_input("Product of interest", value=st.session_state.get("product_interest", ""))
    usage_environment = st.selectbox("Usage environment", ["", "Home", "Office", "Industrial", "Vehicle", "Other"])
    quantity = st.number_input("Quantity", min_value=1, value=1, step=1)
    city = st.text_input("City")
    notes = st.text_area("Notes", max_chars=NOTES_MAX_LENGTH)

    if st.button("Submit enquiry"):
        # 1. Required fields
        if not name or not email or not phone:
            st.warning("Name, email and phone are required.")

        # 2. Format checks, mirrored by the server
        elif not re.match(EMAIL_REGEX, email):
            st.warning("Enter a valid email (e.g., name@example.com).")
        elif not re.fullmatch(PHONE_REGEX, phone.strip()):
            st.warning("Enter a valid 10-digit mobile number.")

        else:
            try:
                response = api.submit_enquiry({
                    "name": name,
                    "company": company or None,
                    "email": email,
                    "phone": phone.strip(),
                    "product_interest": product_interest or None,
                    "usage_environment": usage_environment or None,
                    "quantity": int(quantity),
                    "city": city or None,
                    "notes": notes or None,
                })
                st.success(response.get("message"))
                st.caption(f"Reference: {response.get('enquiry_id')}")
                st.session_state.pop("product_interest", None)
            except api.ApiError as e:
                st.error(f"Error: {e.message}")
