"""HTTP client for the FireGuard backend."""
import logging
from typing import Optional

import requests

from . import config

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _request(method: str, endpoint: str, token: Optional[str] = None, **kwargs) -> dict:
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    try:
        response = requests.request(
            method,
            f"{config.API_BASE_URL}{endpoint}",
            headers=headers,
            timeout=config.REQUEST_TIMEOUT,
            **kwargs,
        )
    except requests.RequestException as e:
        logger.error("API error [%s]: %s", endpoint, e)
        raise ApiError("Could not reach the server. Please try again.") from e

    # Safely extract the JSON body, else fall back to raw text
    try:
        data = response.json()
    except ValueError:
        data = {}

    if not response.ok:
        message = data.get("error") or "; ".join(data.get("errors", [])) or response.text or "Something went wrong"
        raise ApiError(message, response.status_code)

    return data


def _params(**values) -> dict:
    return {key: value for key, value in values.items() if value}


# Products

def get_products(category: Optional[str] = None, search: Optional[str] = None) -> list:
    return _request("GET", "/products", params=_params(category=category, search=search))["products"]


def get_product(product_id: str) -> dict:
    return _request("GET", f"/products/{product_id}")["product"]


# Enquiries

def submit_enquiry(data: dict) -> dict:
    return _request("POST", "/enquiry", json=data)


# Admin

def admin_login(email: str, password: str) -> dict:
    return _request("POST", "/admin/login", json={"email": email, "password": password})


def admin_products(token: str) -> list:
    return _request("GET", "/admin/products", token=token)["products"]


def create_product(token: str, product: dict) -> dict:
    return _request("POST", "/admin/products", token=token, json=product)["product"]


def update_product(token: str, product_id: str, updates: dict) -> dict:
    return _request("PUT", f"/admin/products/{product_id}", token=token, json=updates)["product"]


def disable_product(token: str, product_id: str) -> dict:
    return _request("PATCH", f"/admin/products/{product_id}/disable", token=token)["product"]


def get_enquiries(token: str, start_date: Optional[str] = None, end_date: Optional[str] = None,
                  city: Optional[str] = None) -> list:
    params = _params(startDate=start_date, endDate=end_date, city=city)
    return _request("GET", "/admin/enquiries", token=token, params=params)["enquiries"]


def get_monthly_report(token: str, month: Optional[str] = None) -> dict:
    return _request("GET", "/admin/reports/monthly", token=token, params=_params(month=month))["report"]


def get_customers(token: str) -> list:
    return _request("GET", "/admin/users", token=token)["users"]


# Customer accounts

def user_register(name: str, email: str, password: str) -> dict:
    return _request("POST", "/auth/register", json={"name": name, "email": email, "password": password})


def user_login(email: str, password: str) -> dict:
    return _request("POST", "/auth/login", json={"email": email, "password": password})


def user_google(name: str, email: str, google_id: str) -> dict:
    return _request("POST", "/auth/google", json={"name": name, "email": email, "googleId": google_id})


def get_current_user(token: str) -> Optional[dict]:
    try:
        return _request("GET", "/auth/me", token=token)["user"]
    except ApiError:
        return None
