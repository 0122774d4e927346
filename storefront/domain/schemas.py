# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional
from decimal import Decimal
from datetime import datetime


class CamelModel(BaseModel):
    """JSON w camelCase (jak klient SPA), w Pythonie snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------- accounts ----------

class SignupIn(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class MerchantRegisterIn(CamelModel):
    business_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    phone: Optional[str] = None
    address: Optional[str] = None
    business_type: Optional[str] = None


class LoginIn(CamelModel):
    email: EmailStr
    password: str


class UserRead(CamelModel):
    id: int
    email: str
    role: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    business_name: Optional[str] = None


class TokenOut(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


# ---------- catalog ----------

class ProductIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0, le=100)
    quantity: int = Field(0, ge=0)


class ProductOut(CamelModel):
    id: int
    merchant_id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    price: Decimal
    discount: Decimal
    effective_price: Decimal
    quantity: int
    status: str
    created_at: datetime


class ProductStatusIn(CamelModel):
    status: Literal["pending", "approved", "declined"]


# ---------- cart ----------

class CartAddIn(CamelModel):
    customer_id: int
    product_id: int
    quantity: int = 1


class CartQuantityIn(CamelModel):
    quantity: int


class CartItemOut(CamelModel):
    """Dane produktu z katalogu + ilosc z koszyka."""

    id: int
    product_id: int
    merchant_id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    price: Decimal
    discount: Decimal
    status: str
    cart_quantity: int
    unit_price: Decimal
    line_total: Decimal


class CartOut(CamelModel):
    customer_id: int
    items: List[CartItemOut]
    subtotal: Decimal


# ---------- coupons / checkout ----------

class CouponCreateIn(CamelModel):
    discount_percentage: Decimal = Field(..., ge=1, le=100)
    expiry_date: datetime
    description: Optional[str] = Field(None, max_length=500)
    code: Optional[str] = Field(None, pattern=r"^[A-Z0-9]{4,32}$")


class CouponOut(CamelModel):
    id: int
    code: str
    merchant_id: int
    discount_percentage: Decimal
    expiry_date: datetime
    description: Optional[str] = None
    is_used: bool
    is_active: bool
    created_at: datetime


class ApplyCouponIn(CamelModel):
    code: str = Field(..., min_length=1)
    user_id: int


class AppliedCouponOut(CamelModel):
    coupon_id: int
    code: str
    discount_percentage: Decimal
    discount_amount: Decimal
    merchant_id: int


class CheckoutSummaryOut(CamelModel):
    customer_id: int
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal
    coupon: Optional[AppliedCouponOut] = None


# ---------- transactions ----------

class TransactionItemIn(CamelModel):
    product_id: int
    quantity: int = Field(..., ge=1)


class TransactionCreateIn(CamelModel):
    user_id: int
    items: Optional[List[TransactionItemIn]] = None
    total_amount: Decimal = Field(..., ge=0)
    payment_method: str = Field(..., min_length=1, max_length=50)
    payment_id: str = Field(..., min_length=1, max_length=200)
    status: str = "completed"
    coupon_code: Optional[str] = None
    razorpay_order_id: Optional[str] = None
    razorpay_signature: Optional[str] = None


class TransactionItemOut(CamelModel):
    product_id: int
    merchant_id: int
    name: str
    quantity: int
    price: Decimal
    discount: Decimal
    line_total: Decimal
    product: Optional[ProductOut] = None


class TransactionOut(CamelModel):
    id: int
    user_id: int
    items: List[TransactionItemOut]
    total_amount: Decimal
    discount_amount: Decimal
    coupon_id: Optional[int] = None
    payment_method: str
    payment_id: str
    status: str
    created_at: datetime


class TransactionStatusIn(CamelModel):
    status: str = Field(..., min_length=1, max_length=30)


class CustomerInfo(CamelModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str


class MerchantCustomerOut(CamelModel):
    transaction_id: int
    customer: Optional[CustomerInfo] = None
    items: List[TransactionItemOut]
    merchant_total: Decimal
    payment_method: str
    status: str
    created_at: datetime
