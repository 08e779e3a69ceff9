import streamlit as st

from fireguard_web import api


def show():
    product_id = st.session_state.get("product_id")

    if st.button("← Back to products"):
        st.session_state.page = "catalog"
        st.rerun()

    if not product_id:
        st.info("Pick a product from the catalog.")
        return

    try:
        product = api.get_product(product_id)
    except api.ApiError as e:
        # Disabled and unknown products both come back as 404
        st.error(f"Error: {e.message}")
        return

    st.title(product["product_name"])
    left, right = st.columns([1, 2])
    if product.get("image_url"):
        left.image(product["image_url"])

    right.caption(f"{product['category']} · {product['type']} · {product['capacity']}")
    right.markdown(f"### ₹{product['price']:,.0f}")
    right.write(product["long_description"] or product["short_description"])

    if right.button("Request a quote"):
        st.session_state["product_interest"] = product["product_name"]
        st.session_state.page = "enquiry"
        st.rerun()
