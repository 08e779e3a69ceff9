import streamlit as st

from fireguard_web import api

CATEGORIES = ["All", "Extinguishers", "Alarms", "Hydrants", "Signage"]


def show():
    st.title("🧯 Fire Safety Products")

    col1, col2 = st.columns([1, 2])
    category = col1.selectbox("Category", CATEGORIES)
    search = col2.text_input("Search")

    try:
        products = api.get_products(
            category=None if category == "All" else category,
            search=search or None,
        )
    except api.ApiError as e:
        st.error(f"Error: {e.message}")
        return

    if not products:
        st.info("No products match your search.")
        return

    for product in products:
        with st.container(border=True):
            left, right = st.columns([1, 3])
            if product.get("image_url"):
                left.image(product["image_url"])
            right.subheader(product["product_name"])
            right.caption(f"{product['category']} · {product['type']} · {product['capacity']}")
            right.write(product["short_description"])
            right.markdown(f"**₹{product['price']:,.0f}**")
            details, enquire = right.columns(2)
            if details.button("Details", key=f"details_{product['product_id']}"):
                st.session_state.product_id = product["product_id"]
                st.session_state.page = "product"
                st.rerun()
            if enquire.button("Enquire", key=f"enquire_{product['product_id']}"):
                st.session_state["product_interest"] = product["product_name"]
                st.session_state.page = "enquiry"
                st.rerun()
