# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator, model_validator
from typing import List, Literal, Optional, Dict, Any
from decimal import Decimal
from datetime import datetime


INDIAN_STATES = (
    "Andhra Pradesh", "Arunachal Pradesh", "Assam", "Bihar", "Chhattisgarh",
    "Goa", "Gujarat", "Haryana", "Himachal Pradesh", "Jharkhand", "Karnataka",
    "Kerala", "Madhya Pradesh", "Maharashtra", "Manipur", "Meghalaya",
    "Mizoram", "Nagaland", "Odisha", "Punjab", "Rajasthan", "Sikkim",
    "Tamil Nadu", "Telangana", "Tripura", "Uttar Pradesh", "Uttarakhand",
    "West Bengal", "Andaman and Nicobar Islands", "Chandigarh",
    "Dadra and Nagar Haveli and Daman and Diu", "Delhi", "Jammu and Kashmir",
    "Ladakh", "Lakshadweep", "Puducherry",
)

MOBILE_PATTERN = r"^[6-9]\d{9}$"
PINCODE_PATTERN = r"^[1-9][0-9]{5}$"
PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"

Role = Literal["user", "admin"]
Category = Literal["men", "women"]
PaymentMethod = Literal["COD", "UPI", "NetBanking", "Card"]
OrderStatus = Literal["Pending", "Processing", "Shipped", "Delivered", "Cancelled"]
AdminOrderStatus = Literal["Processing", "Shipped", "Delivered", "Cancelled"]
ReviewStatus = Literal["pending", "approved", "rejected"]
AddressLabel = Literal["Home", "Work", "Other"]
RateType = Literal["flat", "weight_based", "price_based", "free"]


class MessageOut(BaseModel):
    message: str


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


# =====================================================
# AUTH / USERS
# =====================================================

class RegisterIn(BaseModel):
    """Schema dla rejestracji uzytkownika."""

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN, description="Numer telefonu, format E.164")
    password: str = Field(..., min_length=1, max_length=256)


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class OtpRequestIn(BaseModel):
    phone: str = Field(..., min_length=1)


class OtpVerifyIn(BaseModel):
    phone: str = Field(..., min_length=1)
    otp: str = Field(..., min_length=4, max_length=8)


class ForgotPasswordIn(BaseModel):
    email: EmailStr


class ResetPasswordIn(BaseModel):
    password: str


class ChangePasswordIn(BaseModel):
    current_password: str
    new_password: str


class UserRead(BaseModel):
    """Schema dla uzytkownika (response)."""

    id: int
    name: str
    email: str
    phone: str
    role: str
    is_verified: bool
    last_login: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    message: str
    user: UserRead
    access_token: str
    token_type: str = "bearer"


class ProfileUpdateIn(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)


class RoleUpdateIn(BaseModel):
    role: Role


class BulkRoleIn(BaseModel):
    user_ids: List[int] = Field(..., min_length=1)
    role: Role


class UserListOut(BaseModel):
    users: List[UserRead]
    pagination: Pagination


# =====================================================
# PRODUCTS
# =====================================================

class VariantIn(BaseModel):
    size: str = Field(..., min_length=1, max_length=20)
    color: str = Field(..., min_length=1, max_length=40)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(..., ge=0)


class VariantOut(BaseModel):
    id: int
    size: str
    color: str
    price: Decimal
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class ImageIn(BaseModel):
    url: str = Field(..., min_length=1)
    public_id: Optional[str] = None


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    details: Optional[str] = None
    category: Category
    images: List[ImageIn] = Field(default_factory=list)
    variants: List[VariantIn] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product name is required")
        return v


class ProductUpdate(BaseModel):
    """Wszystkie pola opcjonalne; variants (jesli podane) zastepuja istniejace."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    details: Optional[str] = None
    category: Optional[Category] = None
    images: Optional[List[ImageIn]] = None
    variants: Optional[List[VariantIn]] = None


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    details: Optional[str] = None
    category: str
    images: List[Dict[str, Any]] = Field(default_factory=list)
    variants: List[VariantOut] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductListOut(BaseModel):
    products: List[ProductOut]
    pagination: Pagination


class BulkProductsIn(BaseModel):
    products: List[ProductCreate]


class StockUpdateIn(BaseModel):
    variant_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=0)


# =====================================================
# CART
# =====================================================

class CartAddIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    variant_id: int = Field(..., gt=0, description="ID wariantu (musi być > 0)")
    quantity: int = Field(1, gt=0, description="Ilość produktu (musi być > 0)")


class CartUpdateIn(BaseModel):
    quantity: int


class CartItemOut(BaseModel):
    """Schema dla produktu w koszyku (response)."""

    product_id: int
    variant_id: int
    name: str
    size: str
    color: str
    image: Optional[str] = None
    quantity: int
    price: Decimal
    line_total: Decimal


class CartSummary(BaseModel):
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    item_count: int
    free_shipping_threshold: Decimal
    remaining_for_free_shipping: Decimal


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    items: List[CartItemOut]
    summary: CartSummary
    message: Optional[str] = None


# =====================================================
# ADDRESSES
# =====================================================

class AddressIn(BaseModel):
    label: AddressLabel = "Home"
    full_name: str = Field(..., min_length=1, max_length=120)
    mobile_number: str = Field(..., pattern=MOBILE_PATTERN)
    alternate_phone: Optional[str] = Field(None, pattern=MOBILE_PATTERN)
    address_line1: str = Field(..., min_length=1, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    landmark: Optional[str] = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    district: str = Field(..., min_length=1, max_length=100)
    state: str
    pincode: str = Field(..., pattern=PINCODE_PATTERN)
    country: str = "India"
    is_default: bool = False

    @field_validator("state")
    @classmethod
    def known_state(cls, v: str) -> str:
        if v not in INDIAN_STATES:
            raise ValueError(f"`{v}` is not a valid state")
        return v


class AddressUpdate(BaseModel):
    label: Optional[AddressLabel] = None
    full_name: Optional[str] = Field(None, min_length=1, max_length=120)
    mobile_number: Optional[str] = Field(None, pattern=MOBILE_PATTERN)
    alternate_phone: Optional[str] = Field(None, pattern=MOBILE_PATTERN)
    address_line1: Optional[str] = Field(None, min_length=1, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    landmark: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    district: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = None
    pincode: Optional[str] = Field(None, pattern=PINCODE_PATTERN)
    country: Optional[str] = None
    is_default: Optional[bool] = None

    @field_validator("state")
    @classmethod
    def known_state(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in INDIAN_STATES:
            raise ValueError(f"`{v}` is not a valid state")
        return v


class AddressOut(BaseModel):
    id: int
    label: str
    full_name: str
    mobile_number: str
    alternate_phone: str
    address_line1: str
    address_line2: Optional[str] = None
    landmark: str
    city: str
    district: str
    state: str
    pincode: str
    country: str
    is_default: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# ORDERS
# =====================================================

class OrderCreate(BaseModel):
    """Schema dla tworzenia zamówienia z koszyka."""

    address_id: int = Field(..., gt=0)
    payment_method: PaymentMethod = "COD"


class OrderItemOut(BaseModel):
    product_id: Optional[int] = None
    variant_id: Optional[int] = None
    name: str
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    order_number: str
    user_id: int
    address_id: Optional[int] = None
    items: List[OrderItemOut]
    total_amount: Decimal
    payment_method: str
    payment_status: str
    order_status: str
    estimated_delivery_date: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    return_status: Optional[str] = None
    return_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TimelineEntry(BaseModel):
    status: str
    date: Optional[datetime] = None
    description: str


class OrderDetailOut(BaseModel):
    order: OrderOut
    timeline: List[TimelineEntry]


class StatusBucket(BaseModel):
    status: str
    count: int
    total_spent: Decimal


class OrderSummaryOut(BaseModel):
    orders_by_status: List[StatusBucket]
    total_orders: int
    total_spent: Decimal


class OrderPagination(BaseModel):
    current_page: int
    total_pages: int
    total_orders: int
    has_more: bool


class OrderListOut(BaseModel):
    orders: List[OrderOut]
    pagination: OrderPagination
    summary: OrderSummaryOut


class CancelOrderIn(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class ReturnRequestIn(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)


class OrderStatusIn(BaseModel):
    status: AdminOrderStatus


class UserDetailOut(BaseModel):
    user: UserRead
    orders: List[OrderOut]
    reviews: List["ReviewOut"]


# =====================================================
# PAYMENTS
# =====================================================

class GatewayOrderIn(BaseModel):
    amount: Decimal
    currency: str = Field("INR", min_length=3, max_length=3)
    receipt: Optional[str] = Field(None, max_length=40)
    order_id: Optional[int] = None


class GatewayOrderOut(BaseModel):
    success: bool = True
    order: Dict[str, Any]
    key_id: str


class VerifyPaymentIn(BaseModel):
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)
    order_id: int


class PaymentFailureIn(BaseModel):
    order_id: int
    error_reason: Optional[str] = None


class PaymentOrderResult(BaseModel):
    success: bool = True
    message: str
    order: OrderOut


class PaymentStatusOut(BaseModel):
    # bramka nie zawsze zwraca wszystkie pola
    id: str
    status: Optional[str] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    created_at: Optional[int] = None
    method: Optional[str] = None


# =====================================================
# REVIEWS
# =====================================================

class ReviewIn(BaseModel):
    product_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=1, le=5)
    title: Optional[str] = Field(None, max_length=100)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewOut(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    product_id: int
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    is_verified_purchase: bool
    status: str
    upvotes: int
    downvotes: int
    helpfulness_score: float
    report_count: int
    created_at: datetime


class VoteIn(BaseModel):
    direction: Literal["up", "down"]


class ReportIn(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class ReviewStatusIn(BaseModel):
    status: ReviewStatus


# =====================================================
# WISHLIST
# =====================================================

class WishlistAddIn(BaseModel):
    product_id: int = Field(..., gt=0)


class WishlistOut(BaseModel):
    products: List[ProductOut]


# =====================================================
# SHIPPING
# =====================================================

class EstimatedDays(BaseModel):
    min: Optional[int] = Field(None, ge=0)
    max: Optional[int] = Field(None, ge=0)


class ShippingRate(BaseModel):
    name: str
    type: RateType
    cost: Optional[Decimal] = Field(None, ge=0)
    min_order_amount: Optional[Decimal] = None
    max_order_amount: Optional[Decimal] = None
    min_weight: Optional[Decimal] = None
    max_weight: Optional[Decimal] = None
    per_kg_rate: Optional[Decimal] = None
    estimated_days: Optional[EstimatedDays] = None

    @model_validator(mode="after")
    def cost_required_unless_free(self):
        if self.type != "free" and self.cost is None:
            raise ValueError(f"Rate `{self.name}` needs a cost")
        return self


class ZoneState(BaseModel):
    country: str
    state: str


class ShippingZoneIn(BaseModel):
    name: str = Field(..., min_length=1)
    countries: List[str] = Field(..., min_length=1)
    states: List[ZoneState] = Field(default_factory=list)
    postal_codes: List[str] = Field(default_factory=list)
    rates: List[ShippingRate] = Field(default_factory=list)
    tax_rate: Decimal = Decimal("0")
    is_active: bool = True
    priority: int = 0

    @field_validator("postal_codes")
    @classmethod
    def strip_codes(cls, v: List[str]) -> List[str]:
        return [c.strip() for c in v]


class ShippingZoneUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    countries: Optional[List[str]] = None
    states: Optional[List[ZoneState]] = None
    postal_codes: Optional[List[str]] = None
    rates: Optional[List[ShippingRate]] = None
    tax_rate: Optional[Decimal] = None
    is_active: Optional[bool] = None
    priority: Optional[int] = None


class ShippingZoneOut(BaseModel):
    id: int
    name: str
    countries: List[str]
    states: List[Dict[str, Any]]
    postal_codes: List[str]
    rates: List[Dict[str, Any]]
    tax_rate: Decimal
    is_active: bool
    priority: int

    model_config = ConfigDict(from_attributes=True)


class ShippingAddress(BaseModel):
    country: str
    state: Optional[str] = None
    postal_code: Optional[str] = None


class OrderDetailsIn(BaseModel):
    subtotal: Decimal = Field(..., ge=0)
    weight: Decimal = Field(Decimal("0"), ge=0)


class ShippingCalcIn(BaseModel):
    address: ShippingAddress
    order_details: OrderDetailsIn


class ShippingQuoteOut(BaseModel):
    zone: str
    name: Optional[str] = None
    cost: Decimal
    estimated_days: Optional[Dict[str, Any]] = None


class ShippingMethodsIn(BaseModel):
    address: ShippingAddress


class ShippingMethodsOut(BaseModel):
    zone: str
    rates: List[Dict[str, Any]]


# =====================================================
# CURRENCIES
# =====================================================

class CurrencyIn(BaseModel):
    code: str = Field(..., min_length=3, max_length=3)
    name: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1, max_length=8)
    exchange_rate: Decimal = Field(Decimal("1"), gt=0)
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return v.upper()


class CurrencyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    symbol: Optional[str] = Field(None, min_length=1, max_length=8)
    exchange_rate: Optional[Decimal] = Field(None, gt=0)
    is_active: Optional[bool] = None


class CurrencyOut(BaseModel):
    id: int
    code: str
    name: str
    symbol: str
    exchange_rate: Decimal
    is_active: bool
    is_base_currency: bool
    last_updated: datetime

    model_config = ConfigDict(from_attributes=True)


class ConvertIn(BaseModel):
    from_currency: str = Field(..., min_length=3, max_length=3)
    to_currency: str = Field(..., min_length=3, max_length=3)
    amount: Decimal = Field(..., ge=0)


class ConvertOut(BaseModel):
    from_currency: str
    to_currency: str
    amount: Decimal
    converted_amount: Decimal


UserDetailOut.model_rebuild()
