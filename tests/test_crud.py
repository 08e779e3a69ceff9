import pytest

from fireguard_api.crud import (
    EnquiryFilters,
    EnquiryRepository,
    MemoryUserDirectory,
    ProductRepository,
    UserRepository,
)
from fireguard_api.errors import Conflict, NotFound, StoreNotConfigured, StoreUnavailable, ValidationError
from fireguard_api.mock_data import MOCK_PRODUCTS
from fireguard_api.utils.security import verify_password

from .conftest import product_row

ENQUIRY = {
    "name": "Ravi Kumar",
    "company": "Kumar Textiles",
    "email": "ravi@example.com",
    "phone": "9876543210",
    "product_interest": "CO2 Fire Extinguisher (4.5kg)",
    "usage_environment": "Industrial",
    "quantity": 4,
    "city": "Surat",
    "notes": "Need delivery before March",
    "source_page": "https://fireguard.example/contact",
}


def enquiry_row(enquiry_id, timestamp, city="Pune", product_interest=""):
    return [enquiry_id, timestamp, "Name", "", "n@example.com", "9876543210",
            product_interest, "", "1", city, "", "Direct API"]


# Products

def test_list_active_uses_mock_data_without_store(unconfigured_store):
    products = ProductRepository(unconfigured_store).list_active()
    assert products
    assert all(p.status == "active" for p in products)
    assert "PROD-006" not in [p.product_id for p in products]


def test_list_all_without_store_includes_disabled_mock_products(unconfigured_store):
    products = ProductRepository(unconfigured_store).list_all()
    assert [p.product_id for p in products] == [p.product_id for p in MOCK_PRODUCTS]


def test_list_active_filters_store_rows(store):
    store.sheets["Products"] += [
        product_row("P-1"),
        product_row("P-2", status="disabled"),
        product_row("P-3", status="Active"),
        product_row("P-4"),
    ]
    products = ProductRepository(store).list_active()
    assert [p.product_id for p in products] == ["P-1", "P-4"]
    assert all(p.status == "active" for p in products)


def test_read_error_falls_back_to_mock_data(store):
    store.sheets["Products"].append(product_row("P-1"))
    store.fail_reads = True
    products = ProductRepository(store).list_active()
    assert [p.product_id for p in products] == [p.product_id for p in MOCK_PRODUCTS if p.status == "active"]


def test_rows_map_positionally(store):
    store.sheets["Products"].append(product_row("P-1", price="2499.50", image_url=""))
    product = ProductRepository(store).get_by_id("P-1")
    assert product.product_name == "Product P-1"
    assert product.capacity == "4.5kg"
    assert product.price == 2499.5
    assert product.image_url == ""
    assert product.created_at == "2025-12-01"


def test_unparseable_price_defaults_to_zero(store):
    store.sheets["Products"].append(product_row("P-1", price="call us"))
    assert ProductRepository(store).get_by_id("P-1").price == 0


def test_get_by_id_missing_returns_none(store):
    assert ProductRepository(store).get_by_id("nope") is None


def test_get_by_id_without_store_uses_mock(unconfigured_store):
    assert ProductRepository(unconfigured_store).get_by_id("PROD-003").product_name == "Smart Smoke Detector Pro"


def test_create_requires_store(unconfigured_store):
    with pytest.raises(StoreNotConfigured):
        ProductRepository(unconfigured_store).create({"product_name": "X", "category": "Y", "price": 1})


def test_create_appends_row_with_defaults(store, clock):
    product = ProductRepository(store, clock=clock).create({
        "product_name": "Foam Extinguisher (9L)",
        "category": "Extinguishers",
        "price": 5200,
        "status": "disabled",
    })
    assert product.product_id == f"PROD-{int(clock().timestamp() * 1000)}"
    assert product.status == "active"
    assert product.created_at == "2026-01-05"
    row = store.sheets["Products"][-1]
    assert row[0] == product.product_id
    assert row[1] == "Foam Extinguisher (9L)"
    assert row[9] == "active"
    assert row[10] == "2026-01-05"


def test_create_keeps_given_id(store):
    product = ProductRepository(store).create({"product_id": "PROD-100", "product_name": "X",
                                               "category": "Y", "price": 1})
    assert product.product_id == "PROD-100"


def test_write_failure_propagates(store):
    store.fail_writes = True
    with pytest.raises(StoreUnavailable):
        ProductRepository(store).create({"product_name": "X", "category": "Y", "price": 1})


def test_update_rewrites_whole_row(store):
    store.sheets["Products"] += [product_row("P-1"), product_row("P-2")]
    updated = ProductRepository(store).update("P-2", {"price": 1999, "product_name": "Renamed"})

    assert updated.price == 1999
    assert updated.product_name == "Renamed"
    assert updated.category == "Extinguishers"
    assert store.updates == [("Products", "A3:K3")]
    assert store.sheets["Products"][2][1] == "Renamed"
    assert store.sheets["Products"][1][1] == "Product P-1"


def test_update_ignores_identity_fields(store):
    store.sheets["Products"].append(product_row("P-1"))
    updated = ProductRepository(store).update("P-1", {"product_id": "P-9", "created_at": "2000-01-01"})
    assert updated.product_id == "P-1"
    assert updated.created_at == "2025-12-01"


def test_update_missing_product(store):
    with pytest.raises(NotFound):
        ProductRepository(store).update("P-404", {"price": 1})


def test_update_requires_store(unconfigured_store):
    with pytest.raises(StoreNotConfigured):
        ProductRepository(unconfigured_store).update("PROD-001", {"price": 1})


def test_update_read_failure_propagates(store):
    store.sheets["Products"].append(product_row("P-1"))
    store.fail_reads = True
    with pytest.raises(StoreUnavailable):
        ProductRepository(store).update("P-1", {"price": 1})


def test_disable_is_a_soft_delete(store):
    store.sheets["Products"] += [product_row("P-1"), product_row("P-2")]
    repo = ProductRepository(store)

    disabled = repo.disable("P-1")

    assert disabled.status == "disabled"
    assert len(store.sheets["Products"]) == 3
    again = repo.get_by_id("P-1")
    assert again.status == "disabled"
    assert again.product_name == disabled.product_name
    assert [p.product_id for p in repo.list_active()] == ["P-2"]


# Enquiries

def test_submit_then_list_roundtrip(store, clock):
    repo = EnquiryRepository(store, clock=clock)
    result = repo.submit(ENQUIRY)

    enquiries = repo.list_all()
    assert len(enquiries) == 1
    stored = enquiries[0]
    assert stored.enquiry_id == result["id"]
    assert stored.enquiry_id == f"ENQ-{int(clock().timestamp() * 1000)}"
    assert stored.timestamp == "2026-01-05T10:30:00.000Z"
    for field, value in ENQUIRY.items():
        assert getattr(stored, field) == value


def test_submit_fills_defaults(store, clock):
    EnquiryRepository(store, clock=clock).submit({"name": "A", "email": "a@example.com", "phone": "9123456789"})
    row = store.sheets["Enquiries"][-1]
    assert row[3] == ""
    assert row[8] == 1
    assert row[11] == "Unknown"


def test_submit_without_store_is_an_error(unconfigured_store):
    with pytest.raises(StoreNotConfigured):
        EnquiryRepository(unconfigured_store).submit(ENQUIRY)


def test_submit_without_store_when_allowed(unconfigured_store, settings, monkeypatch):
    monkeypatch.setattr(settings, "ALLOW_UNPERSISTED_ENQUIRIES", True)
    result = EnquiryRepository(unconfigured_store).submit(ENQUIRY)
    assert result["id"].startswith("ENQ-")


def test_list_all_without_store_is_empty(unconfigured_store):
    assert EnquiryRepository(unconfigured_store).list_all() == []


def test_list_all_read_error_is_empty(store):
    store.sheets["Enquiries"].append(enquiry_row("ENQ-1", "2026-01-02T09:00:00.000Z"))
    store.fail_reads = True
    assert EnquiryRepository(store).list_all() == []


def test_list_all_sorts_newest_first(store):
    store.sheets["Enquiries"] += [
        enquiry_row("ENQ-1", "2026-01-02T09:00:00.000Z"),
        enquiry_row("ENQ-3", "2026-01-20T09:00:00.000Z"),
        enquiry_row("ENQ-2", "2026-01-10T09:00:00.000Z"),
    ]
    assert [e.enquiry_id for e in EnquiryRepository(store).list_all()] == ["ENQ-3", "ENQ-2", "ENQ-1"]


def test_list_all_date_bounds_are_inclusive(store):
    store.sheets["Enquiries"] += [
        enquiry_row("ENQ-1", "2026-01-01T00:00:00.000Z"),
        enquiry_row("ENQ-2", "2026-01-10T00:00:00.000Z"),
        enquiry_row("ENQ-3", "2026-01-20T00:00:00.000Z"),
    ]
    filters = EnquiryFilters(start_date="2026-01-01", end_date="2026-01-10")
    assert [e.enquiry_id for e in EnquiryRepository(store).list_all(filters)] == ["ENQ-2", "ENQ-1"]


def test_list_all_city_is_case_insensitive_substring(store):
    store.sheets["Enquiries"] += [
        enquiry_row("ENQ-1", "2026-01-01T00:00:00.000Z", city="Navi Mumbai"),
        enquiry_row("ENQ-2", "2026-01-02T00:00:00.000Z", city="Delhi"),
        enquiry_row("ENQ-3", "2026-01-03T00:00:00.000Z", city=""),
    ]
    filters = EnquiryFilters(city="MUMBAI")
    assert [e.enquiry_id for e in EnquiryRepository(store).list_all(filters)] == ["ENQ-1"]


def test_list_all_rejects_bad_dates(store):
    with pytest.raises(ValidationError):
        EnquiryRepository(store).list_all(EnquiryFilters(start_date="last tuesday"))


# Users

def test_create_user_in_store(store, clock):
    repo = UserRepository(store, MemoryUserDirectory(), clock=clock)
    user = repo.create("Asha", "Asha@Example.com", "secret1")

    assert user.id == "USR-001"
    assert user.email == "asha@example.com"
    assert user.provider == "local"
    assert verify_password("secret1", user.password_hash)
    assert store.sheets["Users"][-1][0] == "USR-001"
    assert repo.find_by_email("ASHA@example.com").id == "USR-001"
    assert repo.find_by_id("USR-001").name == "Asha"


def test_duplicate_email_conflicts(store):
    repo = UserRepository(store, MemoryUserDirectory())
    repo.create("Asha", "asha@example.com", "secret1")
    with pytest.raises(Conflict):
        repo.create("Other", "ASHA@example.com", "secret2")


def test_create_user_read_failure_propagates(store):
    repo = UserRepository(store, MemoryUserDirectory())
    repo.create("Asha", "asha@example.com", "secret1")

    store.fail_reads = True
    with pytest.raises(StoreUnavailable):
        repo.create("Other", "ASHA@example.com", "secret2")

    store.fail_reads = False
    assert [u.id for u in repo.list_all()] == ["USR-001"]


def test_google_sign_in_read_failure_propagates(store):
    repo = UserRepository(store, MemoryUserDirectory())
    repo.create("Asha", "asha@example.com", "secret1")

    store.fail_reads = True
    with pytest.raises(StoreUnavailable):
        repo.find_or_create_google("Asha", "asha@example.com", "g-123")
    assert len(store.sheets["Users"]) == 2


def test_user_lookups_degrade_to_nobody(store):
    repo = UserRepository(store, MemoryUserDirectory())
    repo.create("Asha", "asha@example.com", "secret1")

    store.fail_reads = True
    assert repo.find_by_email("asha@example.com") is None
    assert repo.find_by_id("USR-001") is None
    assert repo.list_all() == []


def test_google_user_has_no_password(store):
    repo = UserRepository(store, MemoryUserDirectory())
    user = repo.find_or_create_google("Asha", "asha@example.com", "g-123")
    assert user.provider == "google"
    assert user.password_hash is None
    assert user.google_id == "g-123"
    assert store.sheets["Users"][-1][3] == ""

    again = repo.find_or_create_google("Asha", "asha@example.com", "g-123")
    assert again.id == user.id
    assert len(store.sheets["Users"]) == 2


def test_users_without_store_use_memory_directory(unconfigured_store):
    directory = MemoryUserDirectory()
    repo = UserRepository(unconfigured_store, directory)

    seeded = repo.find_by_email("test@example.com")
    assert verify_password("password", seeded.password_hash)

    user = repo.create("Asha", "asha@example.com", "secret1")
    assert user.id == "USR-002"
    assert repo.find_by_id("USR-002") is not None
    assert len(directory.all()) == 2
