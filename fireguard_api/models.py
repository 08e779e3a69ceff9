from typing import List, Literal, Optional

from pydantic import BaseModel, Field

PRODUCT_STATUS_ACTIVE = "active"
PRODUCT_STATUS_DISABLED = "disabled"

# Column layout of each sheet. Order must match the existing spreadsheet.
PRODUCT_COLUMNS = (
    "product_id",
    "product_name",
    "category",
    "type",
    "capacity",
    "short_description",
    "long_description",
    "image_url",
    "price",
    "status",
    "created_at",
)

ENQUIRY_COLUMNS = (
    "enquiry_id",
    "timestamp",
    "name",
    "company",
    "email",
    "phone",
    "product_interest",
    "usage_environment",
    "quantity",
    "city",
    "notes",
    "source_page",
)

USER_COLUMNS = (
    "id",
    "name",
    "email",
    "password_hash",
    "provider",
    "google_id",
    "created_at",
)


class SheetRange:
    def __init__(self, sheet: str, columns: tuple):
        self.sheet = sheet
        self.columns = columns
        self.last_column = chr(ord("A") + len(columns) - 1)

    @property
    def data(self) -> str:
        # Skip the header row
        return f"A2:{self.last_column}"

    @property
    def whole(self) -> str:
        return f"A:{self.last_column}"

    @property
    def ids(self) -> str:
        return "A:A"

    def row(self, number: int) -> str:
        return f"A{number}:{self.last_column}{number}"


PRODUCTS = SheetRange("Products", PRODUCT_COLUMNS)
ENQUIRIES = SheetRange("Enquiries", ENQUIRY_COLUMNS)
USERS = SheetRange("Users", USER_COLUMNS)


def _pad(row: List[str], columns: tuple) -> List[str]:
    # The Sheets API drops trailing empty cells
    return list(row) + [""] * (len(columns) - len(row))


def _to_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_int(value, default: int = 1) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class Product(BaseModel):
    product_id: str
    product_name: str = ""
    category: str = ""
    type: str = ""
    capacity: str = ""
    short_description: str = ""
    long_description: str = ""
    image_url: str = ""
    price: float = Field(default=0, ge=0)
    status: Literal["active", "disabled"] = PRODUCT_STATUS_ACTIVE
    created_at: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == PRODUCT_STATUS_ACTIVE

    @classmethod
    def from_row(cls, row: List[str]) -> "Product":
        values = dict(zip(PRODUCT_COLUMNS, _pad(row, PRODUCT_COLUMNS)))
        values["price"] = max(_to_float(values["price"]), 0.0)
        # Anything other than an exact "active" is hidden from the public catalog
        if values["status"] != PRODUCT_STATUS_ACTIVE:
            values["status"] = PRODUCT_STATUS_DISABLED
        return cls(**values)

    def to_row(self) -> list:
        data = self.model_dump()
        return [data[column] for column in PRODUCT_COLUMNS]


class Enquiry(BaseModel):
    enquiry_id: str
    timestamp: str
    name: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    product_interest: str = ""
    usage_environment: str = ""
    quantity: int = 1
    city: str = ""
    notes: str = ""
    source_page: str = "Unknown"

    @classmethod
    def from_row(cls, row: List[str]) -> "Enquiry":
        values = dict(zip(ENQUIRY_COLUMNS, _pad(row, ENQUIRY_COLUMNS)))
        values["quantity"] = _to_int(values["quantity"]) or 1
        return cls(**values)

    def to_row(self) -> list:
        data = self.model_dump()
        return [data[column] for column in ENQUIRY_COLUMNS]


class User(BaseModel):
    id: str
    name: str
    email: str
    password_hash: Optional[str] = None
    provider: Literal["local", "google"] = "local"
    google_id: Optional[str] = None
    created_at: str = ""

    @classmethod
    def from_row(cls, row: List[str]) -> "User":
        values = dict(zip(USER_COLUMNS, _pad(row, USER_COLUMNS)))
        values["password_hash"] = values["password_hash"] or None
        values["google_id"] = values["google_id"] or None
        values["provider"] = "google" if values["provider"] == "google" else "local"
        return cls(**values)

    def to_row(self) -> list:
        data = self.model_dump()
        return [data[column] or "" for column in USER_COLUMNS]

    def public(self) -> dict:
        """User fields that are safe to send to clients."""
        return self.model_dump(exclude={"password_hash"})
