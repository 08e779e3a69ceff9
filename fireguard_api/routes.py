import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from . import config
from .analytics import monthly_report
from .auth import authenticate_admin, require_admin, require_user
from .crud import EnquiryFilters, EnquiryRepository, ProductRepository, UserRepository
from .database import get_store
from .errors import ValidationError
from .utils.security import (
    is_password_valid,
    issue_admin_token,
    issue_user_token,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# Request model for a public enquiry
class EnquiryRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(pattern=config.PHONE_REGEX)
    company: Optional[str] = None
    product_interest: Optional[str] = None
    usage_environment: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=1)
    city: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=config.NOTES_MAX_LENGTH)


# Request model for the admin login
class AdminLoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


# Request model for creating a product
class ProductCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    product_id: Optional[str] = None
    product_name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    type: str = ""
    capacity: str = ""
    short_description: str = ""
    long_description: str = ""
    image_url: str = ""
    price: float = Field(ge=0)


# Request model for a partial product update
class ProductUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    product_name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = None
    capacity: Optional[str] = None
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    status: Optional[Literal["active", "disabled"]] = None


# Request models for customer accounts
class RegisterRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    password: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class GoogleAuthRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    googleId: str = Field(min_length=1)


# Repository dependencies
def get_product_repo(store=Depends(get_store)) -> ProductRepository:
    return ProductRepository(store)


def get_enquiry_repo(store=Depends(get_store)) -> EnquiryRepository:
    return EnquiryRepository(store)


def get_user_repo(request: Request, store=Depends(get_store)) -> UserRepository:
    return UserRepository(store, request.app.state.user_directory)


# ------------------------------------------------------------ public API

@router.get("/products")
def list_products(
    category: Optional[str] = None,
    search: Optional[str] = None,
    repo: ProductRepository = Depends(get_product_repo),
):
    products = repo.list_active()

    if category:
        products = [p for p in products if p.category.lower() == category.lower()]

    if search:
        needle = search.lower()
        products = [
            p for p in products
            if needle in p.product_name.lower() or needle in p.short_description.lower()
        ]

    return {"success": True, "count": len(products), "products": products}


@router.get("/products/{product_id}")
def get_product(product_id: str, repo: ProductRepository = Depends(get_product_repo)):
    product = repo.get_by_id(product_id)
    # Disabled products are only visible to admins
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True, "product": product}


@router.post("/enquiry", status_code=201)
def submit_enquiry(
    request: EnquiryRequest,
    referer: Optional[str] = Header(default=None),
    repo: EnquiryRepository = Depends(get_enquiry_repo),
):
    data = request.model_dump()
    data["source_page"] = referer or "Direct API"
    result = repo.submit(data)
    return {
        "success": True,
        "message": "Thank you! Your enquiry has been submitted. Our team will contact you shortly.",
        "enquiry_id": result["id"],
    }


# ------------------------------------------------------------- admin API

@router.post("/admin/login")
def admin_login(request: AdminLoginRequest):
    admin = authenticate_admin(request.email, request.password)
    return {
        "success": True,
        "message": "Login successful",
        "token": issue_admin_token(admin["email"]),
        "admin": admin,
    }


@router.get("/admin/products")
def admin_list_products(
    admin: dict = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repo),
):
    products = repo.list_all()
    return {"success": True, "count": len(products), "products": products}


@router.post("/admin/products", status_code=201)
def admin_create_product(
    request: ProductCreate,
    admin: dict = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repo),
):
    product = repo.create(request.model_dump())
    return {"success": True, "product": product}


@router.put("/admin/products/{product_id}")
def admin_update_product(
    product_id: str,
    request: ProductUpdate,
    admin: dict = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repo),
):
    product = repo.update(product_id, request.model_dump(exclude_unset=True))
    return {"success": True, "product": product}


@router.patch("/admin/products/{product_id}/disable")
def admin_disable_product(
    product_id: str,
    admin: dict = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repo),
):
    product = repo.disable(product_id)
    return {"success": True, "message": "Product disabled", "product": product}


@router.get("/admin/enquiries")
def admin_list_enquiries(
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    city: Optional[str] = None,
    admin: dict = Depends(require_admin),
    repo: EnquiryRepository = Depends(get_enquiry_repo),
):
    enquiries = repo.list_all(EnquiryFilters(start_date=start_date, end_date=end_date, city=city))
    return {"success": True, "count": len(enquiries), "enquiries": enquiries}


@router.get("/admin/reports/monthly")
def admin_monthly_report(
    month: Optional[str] = None,
    admin: dict = Depends(require_admin),
    repo: EnquiryRepository = Depends(get_enquiry_repo),
):
    return {"success": True, "report": monthly_report(repo, month)}


@router.get("/admin/users")
def admin_list_users(
    admin: dict = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repo),
):
    return {"success": True, "users": [user.public() for user in repo.list_all()]}


# ---------------------------------------------------------- customer API

@router.post("/auth/register", status_code=201)
def register_user(request: RegisterRequest, repo: UserRepository = Depends(get_user_repo)):
    if not is_password_valid(request.password):
        raise ValidationError(f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters")

    user = repo.create(request.name, request.email, request.password)
    return {
        "success": True,
        "message": "Account created successfully",
        "user": user.public(),
        "token": issue_user_token(user),
    }


@router.post("/auth/login")
def login_user(request: LoginRequest, repo: UserRepository = Depends(get_user_repo)):
    user = repo.find_by_email(request.email)
    if not user:
        # Don't reveal whether the account exists
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if user.provider == "google" and not user.password_hash:
        raise HTTPException(
            status_code=401,
            detail='This account uses Google sign-in. Please use "Sign in with Google".',
        )

    if not verify_password(request.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return {
        "success": True,
        "message": "Login successful",
        "user": user.public(),
        "token": issue_user_token(user),
    }


@router.post("/auth/google")
def google_sign_in(request: GoogleAuthRequest, repo: UserRepository = Depends(get_user_repo)):
    user = repo.find_or_create_google(request.name, request.email, request.googleId)
    return {
        "success": True,
        "message": "Google sign-in successful",
        "user": user.public(),
        "token": issue_user_token(user),
    }


@router.get("/auth/me")
def current_user(
    principal: dict = Depends(require_user),
    repo: UserRepository = Depends(get_user_repo),
):
    user = repo.find_by_id(principal["id"])
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "user": user.public()}
