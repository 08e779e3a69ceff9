import re

import pendulum
import pytest
from fastapi.testclient import TestClient

from fireguard_api import config
from fireguard_api.crud import MemoryUserDirectory
from fireguard_api.database import SheetsStore
from fireguard_api.errors import StoreUnavailable
from fireguard_api.main import create_app
from fireguard_api.models import ENQUIRY_COLUMNS, PRODUCT_COLUMNS, USER_COLUMNS
from fireguard_api.utils.security import issue_admin_token

RANGE_REGEX = re.compile(r"^A(\d*):([A-Z])(\d*)$")


class FakeSheetsStore(SheetsStore):
    """In-memory spreadsheet honouring the SheetsStore contract."""

    def __init__(self):
        super().__init__("sheet-id", "svc@example.iam.gserviceaccount.com", "key")
        self.sheets = {
            "Products": [list(PRODUCT_COLUMNS)],
            "Enquiries": [list(ENQUIRY_COLUMNS)],
            "Users": [list(USER_COLUMNS)],
        }
        self.fail_reads = False
        self.fail_writes = False
        self.updates = []

    def connect(self):
        return self

    def read_range(self, sheet_name, cell_range):
        if self.fail_reads:
            raise StoreUnavailable("read failed")
        rows = self.sheets[sheet_name]
        start, last_column, _ = RANGE_REGEX.match(cell_range).groups()
        width = ord(last_column) - ord("A") + 1
        first = int(start) - 1 if start else 0
        # The real API returns strings and drops trailing empty cells
        values = []
        for row in rows[first:]:
            cells = ["" if cell is None else str(cell) for cell in row[:width]]
            while cells and cells[-1] == "":
                cells.pop()
            values.append(cells)
        return values

    def append_row(self, sheet_name, cell_range, row):
        if self.fail_writes:
            raise StoreUnavailable("append failed")
        self.sheets[sheet_name].append(list(row))

    def update_range(self, sheet_name, cell_range, row):
        if self.fail_writes:
            raise StoreUnavailable("update failed")
        start, _, end = RANGE_REGEX.match(cell_range).groups()
        assert start == end
        self.sheets[sheet_name][int(start) - 1] = list(row)
        self.updates.append((sheet_name, cell_range))


def product_row(product_id, status="active", **overrides):
    values = {
        "product_id": product_id,
        "product_name": f"Product {product_id}",
        "category": "Extinguishers",
        "type": "CO2",
        "capacity": "4.5kg",
        "short_description": "Short",
        "long_description": "Long",
        "image_url": "",
        "price": "1500",
        "status": status,
        "created_at": "2025-12-01",
    }
    values.update(overrides)
    return [values[column] for column in PRODUCT_COLUMNS]


@pytest.fixture
def store():
    return FakeSheetsStore()


@pytest.fixture
def unconfigured_store():
    return SheetsStore(None, None, None)


@pytest.fixture
def clock():
    return lambda: pendulum.datetime(2026, 1, 5, 10, 30, 0, tz="UTC")


@pytest.fixture(autouse=True)
def settings(monkeypatch):
    monkeypatch.setattr(config, "JWT_SECRET", "test-secret-that-is-long-enough-for-hs256")
    monkeypatch.setattr(config, "APP_ENV", "development")
    monkeypatch.setattr(config, "ADMIN_EMAIL", "admin@fireguard.com")
    monkeypatch.setattr(config, "ADMIN_PASSWORD_HASH", None)
    monkeypatch.setattr(config, "ALLOW_UNPERSISTED_ENQUIRIES", False)
    return config


@pytest.fixture
def client(store):
    app = create_app(store=store, user_directory=MemoryUserDirectory())
    with TestClient(app) as c:
        yield c


@pytest.fixture
def offline_client(unconfigured_store):
    app = create_app(store=unconfigured_store, user_directory=MemoryUserDirectory())
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {issue_admin_token('admin@fireguard.com')}"}
