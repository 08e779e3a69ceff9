import pandas as pd
import streamlit as st

from fireguard_web import api


def _handle(error: api.ApiError):
    # The server rejected the session: drop it and go back to the login screen
    if error.status_code == 401:
        st.session_state.admin_session.logout()
        st.session_state.page = "admin_login"
        st.rerun()
    st.error(f"Error: {error.message}")


def _report(token: str):
    month = st.text_input("Month (YYYY-MM)", value="")
    try:
        report = api.get_monthly_report(token, month or None)
    except api.ApiError as e:
        _handle(e)
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Enquiries", report["total_enquiries"])
    col2.metric("Top product", report["top_product_interest"])
    col3.metric("Top city", report["top_city"])

    if report["daily_trend"]:
        trend = pd.DataFrame(report["daily_trend"]).set_index("date")
        st.line_chart(trend["count"])

    left, right = st.columns(2)
    left.dataframe(pd.Series(report["product_breakdown"], name="enquiries"))
    right.dataframe(pd.Series(report["city_breakdown"], name="enquiries"))


def _enquiries(token: str):
    col1, col2, col3 = st.columns(3)
    start_date = col1.text_input("From (YYYY-MM-DD)")
    end_date = col2.text_input("To (YYYY-MM-DD)")
    city = col3.text_input("City")

    try:
        enquiries = api.get_enquiries(token, start_date or None, end_date or None, city or None)
    except api.ApiError as e:
        _handle(e)
        return

    if not enquiries:
        st.info("No enquiries found.")
        return
    st.dataframe(pd.DataFrame(enquiries), hide_index=True)


def _products(token: str):
    try:
        products = api.admin_products(token)
    except api.ApiError as e:
        _handle(e)
        return

    if products:
        st.dataframe(
            pd.DataFrame(products)[["product_id", "product_name", "category", "price", "status", "created_at"]],
            hide_index=True,
        )

    with st.expander("Add product"):
        name = st.text_input("Product name")
        category = st.text_input("Category")
        price = st.number_input("Price", min_value=0.0, step=100.0)
        short_description = st.text_input("Short description")
        if st.button("Create product"):
            if not name or not category:
                st.warning("Product name and category are required.")
            else:
                try:
                    product = api.create_product(token, {
                        "product_name": name,
                        "category": category,
                        "price": price,
                        "short_description": short_description,
                    })
                    st.success(f"{product['product_id']} created")
                    st.rerun()
                except api.ApiError as e:
                    _handle(e)

    if not products:
        return

    product_id = st.selectbox("Product", [p["product_id"] for p in products])
    selected = next(p for p in products if p["product_id"] == product_id)
    new_price = st.number_input("New price", min_value=0.0, value=float(selected["price"]), step=100.0)

    col1, col2 = st.columns(2)
    if col1.button("Update price"):
        try:
            api.update_product(token, product_id, {"price": new_price})
            st.success(f"{product_id} updated")
            st.rerun()
        except api.ApiError as e:
            _handle(e)

    if selected["status"] == "active" and col2.button("Disable product"):
        try:
            api.disable_product(token, product_id)
            st.success(f"{product_id} disabled")
            st.rerun()
        except api.ApiError as e:
            _handle(e)


def _customers(token: str):
    try:
        customers = api.get_customers(token)
    except api.ApiError as e:
        _handle(e)
        return
    st.dataframe(pd.DataFrame(customers), hide_index=True)


def show():
    admin = st.session_state.admin_session.payload or {}
    st.title("📋 Admin Dashboard")
    st.caption(f"Signed in as {admin.get('email', '')}")

    token = st.session_state.admin_session.token
    report_tab, enquiries_tab, products_tab, customers_tab = st.tabs(
        ["Monthly report", "Enquiries", "Products", "Customers"]
    )
    with report_tab:
        _report(token)
    with enquiries_tab:
        _enquiries(token)
    with products_tab:
        _products(token)
    with customers_tab:
        _customers(token)

    # Logout button
    if st.button("Logout"):
        st.session_state.admin_session.logout()
        st.session_state.page = "admin_login"
        st.rerun()
