import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

import pendulum

from . import config
from .database import ReadResult
from .errors import Conflict, NotFound, StoreNotConfigured, ValidationError
from .mock_data import MOCK_PRODUCTS, MOCK_USER
from .models import (
    ENQUIRIES,
    PRODUCT_STATUS_DISABLED,
    PRODUCTS,
    USERS,
    Enquiry,
    Product,
    User,
)
from .utils.security import hash_password

logger = logging.getLogger(__name__)


def _now() -> pendulum.DateTime:
    return pendulum.now("UTC")


def iso_timestamp(moment: pendulum.DateTime) -> str:
    # Same shape as JavaScript's toISOString(), which the sheet already holds
    return moment.in_timezone("UTC").format("YYYY-MM-DD[T]HH:mm:ss.SSS[Z]")


def epoch_millis(moment: pendulum.DateTime) -> int:
    return int(moment.timestamp() * 1000)


@dataclass(frozen=True)
class FallbackPolicy:
    """What a repository reads when the store cannot answer.

    ``substitute`` returns the stand-in records; ``None`` means propagate.
    """
    name: str
    substitute: Optional[Callable[[], list]] = None

    def resolve(self, result: ReadResult, parse: Callable[[list], object]) -> list:
        if not result.unavailable:
            return [parse(row) for row in result.rows if row and row[0]]
        if self.substitute is None:
            raise result.error
        if not result.not_configured:
            logger.error("Error reading %s, serving fallback data: %s", self.name, result.error)
        return list(self.substitute())


# ---------------------------------------------------------------- products

class ProductRepository:
    policy = FallbackPolicy("products", substitute=lambda: MOCK_PRODUCTS)

    def __init__(self, store, clock: Callable[[], pendulum.DateTime] = _now):
        self.store = store
        self.clock = clock

    def _all(self) -> List[Product]:
        return self.policy.resolve(self.store.read_result(PRODUCTS.sheet, PRODUCTS.data), Product.from_row)

    def list_active(self) -> List[Product]:
        return [product for product in self._all() if product.is_active]

    def list_all(self) -> List[Product]:
        return self._all()

    def get_by_id(self, product_id: str) -> Optional[Product]:
        for product in self._all():
            if product.product_id == product_id:
                return product
        return None

    def create(self, data: dict) -> Product:
        if self.store.connect() is None:
            raise StoreNotConfigured()

        moment = self.clock()
        fields = {key: value for key, value in data.items() if value is not None}
        fields["product_id"] = fields.get("product_id") or f"PROD-{epoch_millis(moment)}"
        fields["status"] = "active"
        fields["created_at"] = moment.to_date_string()
        product = Product(**fields)

        self.store.append_row(PRODUCTS.sheet, PRODUCTS.whole, product.to_row())
        logger.info("Created product %s", product.product_id)
        return product

    def update(self, product_id: str, patch: dict) -> Product:
        """Rewrite the product's whole row with ``patch`` merged in.

        Read-modify-write with no version check: two admins editing the same
        product at once can lose one of the edits.
        """
        if self.store.connect() is None:
            raise StoreNotConfigured()

        ids = self.store.read_range(PRODUCTS.sheet, PRODUCTS.ids)
        row_index = next((i for i, row in enumerate(ids) if row and row[0] == product_id), None)
        if row_index is None:
            raise NotFound("Product not found")

        # Write path: a failed read propagates instead of merging onto mock data
        rows = self.store.read_range(PRODUCTS.sheet, PRODUCTS.data)
        current = next((Product.from_row(row) for row in rows if row and row[0] == product_id), None)
        if current is None:
            raise NotFound("Product not found")

        changes = {key: value for key, value in patch.items()
                   if value is not None and key not in ("product_id", "created_at")}
        updated = Product(**{**current.model_dump(), **changes})

        # Sheet rows are 1-based and column A includes the header row
        self.store.update_range(PRODUCTS.sheet, PRODUCTS.row(row_index + 1), updated.to_row())
        logger.info("Updated product %s", product_id)
        return updated

    def disable(self, product_id: str) -> Product:
        # Soft delete: the row stays in the sheet
        return self.update(product_id, {"status": PRODUCT_STATUS_DISABLED})


# --------------------------------------------------------------- enquiries

@dataclass
class EnquiryFilters:
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    city: Optional[str] = None


def _parse_timestamp(value: str) -> Optional[pendulum.DateTime]:
    try:
        parsed = pendulum.parse(value, tz="UTC")
    except (ValueError, TypeError):
        return None
    if not isinstance(parsed, pendulum.DateTime):
        return None
    return parsed


def _parse_bound(value: Optional[str], label: str) -> Optional[pendulum.DateTime]:
    if not value:
        return None
    parsed = _parse_timestamp(value)
    if parsed is None:
        raise ValidationError(f"Invalid {label}: {value}")
    return parsed


class EnquiryRepository:
    # Enquiries are never fabricated
    policy = FallbackPolicy("enquiries", substitute=lambda: [])

    def __init__(self, store, clock: Callable[[], pendulum.DateTime] = _now):
        self.store = store
        self.clock = clock

    def submit(self, data: dict) -> dict:
        moment = self.clock()
        enquiry = Enquiry(
            enquiry_id=f"ENQ-{epoch_millis(moment)}",
            timestamp=iso_timestamp(moment),
            name=data["name"],
            company=data.get("company") or "",
            email=data["email"],
            phone=data["phone"],
            product_interest=data.get("product_interest") or "",
            usage_environment=data.get("usage_environment") or "",
            quantity=data.get("quantity") or 1,
            city=data.get("city") or "",
            notes=data.get("notes") or "",
            source_page=data.get("source_page") or "Unknown",
        )

        if self.store.connect() is None:
            if not config.ALLOW_UNPERSISTED_ENQUIRIES:
                raise StoreNotConfigured("Enquiry storage is not configured")
            logger.warning("Store not configured, enquiry accepted without persistence: %s", enquiry.model_dump())
            return {"id": enquiry.enquiry_id}

        self.store.append_row(ENQUIRIES.sheet, ENQUIRIES.whole, enquiry.to_row())
        logger.info("Stored enquiry %s", enquiry.enquiry_id)
        return {"id": enquiry.enquiry_id}

    def list_all(self, filters: Optional[EnquiryFilters] = None) -> List[Enquiry]:
        filters = filters or EnquiryFilters()
        start = _parse_bound(filters.start_date, "startDate")
        end = _parse_bound(filters.end_date, "endDate")

        enquiries = self.policy.resolve(self.store.read_result(ENQUIRIES.sheet, ENQUIRIES.data), Enquiry.from_row)

        if start or end:
            bounded = []
            for enquiry in enquiries:
                moment = _parse_timestamp(enquiry.timestamp)
                if moment is None:
                    continue
                if start and moment < start:
                    continue
                if end and moment > end:
                    continue
                bounded.append(enquiry)
            enquiries = bounded

        if filters.city:
            needle = filters.city.lower()
            enquiries = [e for e in enquiries if needle in (e.city or "").lower()]

        oldest = pendulum.datetime(1970, 1, 1, tz="UTC")
        enquiries.sort(key=lambda e: _parse_timestamp(e.timestamp) or oldest, reverse=True)
        return enquiries


# ------------------------------------------------------------------- users

class MemoryUserDirectory:
    """In-process accounts used when no store is configured (development)."""

    def __init__(self):
        self._lock = threading.Lock()
        self.users: List[User] = [
            User(
                id=MOCK_USER["id"],
                name=MOCK_USER["name"],
                email=MOCK_USER["email"],
                password_hash=hash_password(MOCK_USER["password"]),
                provider="local",
                created_at=iso_timestamp(_now()),
            )
        ]

    def all(self) -> List[User]:
        with self._lock:
            return list(self.users)

    def add(self, user: User) -> None:
        with self._lock:
            self.users.append(user)


class UserRepository:
    # A failing read finds nobody; accounts are never invented
    policy = FallbackPolicy("users", substitute=lambda: [])

    def __init__(self, store, directory: MemoryUserDirectory, clock: Callable[[], pendulum.DateTime] = _now):
        self.store = store
        self.directory = directory
        self.clock = clock

    def _use_store(self) -> bool:
        return self.store.connect() is not None

    def _all(self) -> List[User]:
        if not self._use_store():
            return self.directory.all()
        return self.policy.resolve(self.store.read_result(USERS.sheet, USERS.data), User.from_row)

    def list_all(self) -> List[User]:
        return self._all()

    def find_by_email(self, email: str) -> Optional[User]:
        wanted = email.lower()
        return next((u for u in self._all() if u.email.lower() == wanted), None)

    def find_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self._all() if u.id == user_id), None)

    def _all_for_write(self) -> List[User]:
        # Write path: a failed read propagates, otherwise the email check and
        # the next id would be computed against an empty list
        if not self._use_store():
            return self.directory.all()
        rows = self.store.read_range(USERS.sheet, USERS.data)
        return [User.from_row(row) for row in rows if row and row[0]]

    def _next_id(self, existing: List[User]) -> str:
        return f"USR-{len(existing) + 1:03d}"

    def _save(self, user: User) -> User:
        if self._use_store():
            self.store.append_row(USERS.sheet, USERS.whole, user.to_row())
        else:
            self.directory.add(user)
        logger.info("Created %s user: %s", user.provider, user.email)
        return user

    def create(self, name: str, email: str, password: str) -> User:
        # Check-then-write, not atomic: two simultaneous registrations with
        # the same email can both get through.
        existing = self._all_for_write()
        if any(u.email.lower() == email.lower() for u in existing):
            raise Conflict("Email already registered")

        return self._save(User(
            id=self._next_id(existing),
            name=name,
            email=email.lower(),
            password_hash=hash_password(password),
            provider="local",
            created_at=iso_timestamp(self.clock()),
        ))

    def find_or_create_google(self, name: str, email: str, google_id: str) -> User:
        existing = self._all_for_write()
        user = next((u for u in existing if u.email.lower() == email.lower()), None)
        if user is not None:
            return user

        return self._save(User(
            id=self._next_id(existing),
            name=name,
            email=email.lower(),
            password_hash=None,
            provider="google",
            google_id=google_id,
            created_at=iso_timestamp(self.clock()),
        ))
