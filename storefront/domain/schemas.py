# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, HttpUrl, PlainSerializer, model_validator
from typing import Annotated, Generic, List, Literal, Optional, TypeVar
from decimal import Decimal
from datetime import datetime


# Decimal na wejściu/wyjściu modelu, liczba w JSON
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

T = TypeVar("T")

UserRole = Literal["user", "admin", "moderator"]
UserStatus = Literal["active", "inactive", "pending", "locked"]
ProductStatus = Literal["active", "inactive", "draft"]
CouponType = Literal["percentage", "fixed"]
OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
ProductSort = Literal["newest", "price_asc", "price_desc", "name", "rating"]


# =====================================================
# ENVELOPES
# =====================================================
class Envelope(BaseModel, Generic[T]):
    """Koperta odpowiedzi: ``{"success": true, "data": ...}``."""

    success: bool = True
    data: T


class Pagination(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int


class Page(BaseModel, Generic[T]):
    data: List[T]
    pagination: Pagination


class MessageOut(BaseModel):
    message: str


# =====================================================
# USERS
# =====================================================
class UserCreate(BaseModel):
    """Schema dla tworzenia użytkownika."""

    email: EmailStr = Field(..., max_length=255)
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    avatar: Optional[str] = None


class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class UserRead(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    avatar: Optional[str] = None
    role: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# CATALOG
# =====================================================
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    slug: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[int] = Field(None, gt=0)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    slug: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[int] = Field(None, gt=0)


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    """Schema dla tworzenia produktu (admin)."""

    name: str = Field(..., min_length=2, max_length=200)
    description: str = Field(..., min_length=10)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    category_id: int = Field(..., gt=0)
    stock: int = Field(..., ge=0)
    images: List[HttpUrl] = Field(..., min_length=1)
    featured: bool = False
    status: ProductStatus = "active"


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = Field(None, min_length=10)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = Field(None, gt=0)
    stock: Optional[int] = Field(None, ge=0)
    images: Optional[List[HttpUrl]] = Field(None, min_length=1)
    featured: Optional[bool] = None
    status: Optional[ProductStatus] = None


class ProductOut(BaseModel):
    id: int
    name: str
    slug: str
    description: str
    price: Money
    original_price: Optional[Money] = None
    category_id: int
    stock: int
    images: List[str]
    rating: Money
    review_count: int
    featured: bool
    status: str
    created_at: datetime
    category: Optional[CategoryOut] = None

    model_config = ConfigDict(from_attributes=True)


class ProductList(BaseModel):
    products: List[ProductOut]


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., min_length=2, max_length=100)
    comment: str = Field(..., min_length=10, max_length=1000)


class ReviewAuthor(BaseModel):
    first_name: str
    last_name: str
    avatar: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewOut(BaseModel):
    id: int
    user_id: int
    product_id: int
    rating: int
    title: str
    comment: str
    created_at: datetime
    user: Optional[ReviewAuthor] = None

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# CART
# =====================================================
class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(1, gt=0, description="Ilość produktu (musi być > 0)")


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., gt=0)


class CartItemOut(BaseModel):
    """Schema dla produktu w koszyku (response)."""

    id: int
    product_id: int
    quantity: int
    created_at: datetime
    product: Optional[ProductOut] = None

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    items: List[CartItemOut]
    subtotal: Money
    item_count: int


class OrderTotalsOut(BaseModel):
    subtotal: Money
    discount: Money
    tax: Money
    shipping: Money
    total: Money

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# COUPONS
# =====================================================
class CouponApplyIn(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)

    model_config = ConfigDict(str_strip_whitespace=True)


class CouponApplyOut(BaseModel):
    code: str
    type: str
    discount: Money
    totals: OrderTotalsOut


class CouponCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    type: CouponType
    discount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    min_order_amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    max_usages: Optional[int] = Field(None, gt=0)
    expires_at: Optional[datetime] = None
    is_active: bool = True

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="after")
    def check_percentage(self):
        if self.type == "percentage" and self.discount > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        return self


class CouponUpdate(BaseModel):
    discount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    min_order_amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    max_usages: Optional[int] = Field(None, gt=0)
    expires_at: Optional[datetime] = None
    is_active: Optional[bool] = None


class CouponOut(BaseModel):
    id: int
    code: str
    type: str
    discount: Money
    min_order_amount: Optional[Money] = None
    max_usages: Optional[int] = None
    usage_count: int
    is_active: bool
    expires_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# ORDERS
# =====================================================
class AddressIn(BaseModel):
    street: str = Field(..., min_length=5)
    city: str = Field(..., min_length=2)
    state: str = Field(..., min_length=2)
    zip_code: str = Field(..., min_length=5)
    country: str = Field(..., min_length=2)


class OrderCreate(BaseModel):
    """Schema dla tworzenia zamówienia z koszyka."""

    shipping_address: AddressIn
    billing_address: AddressIn
    payment_method: str = Field(..., min_length=1)
    notes: Optional[str] = None
    coupon_code: Optional[str] = Field(None, max_length=64)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    name: str
    price: Money
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    user_id: int
    status: str
    subtotal: Money
    discount: Money
    coupon_code: Optional[str] = None
    tax: Money
    shipping: Money
    total: Money
    shipping_address: AddressIn
    billing_address: AddressIn
    payment_method: str
    payment_status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)


class OrderBuyer(BaseModel):
    email: str
    first_name: str
    last_name: str

    model_config = ConfigDict(from_attributes=True)


class AdminOrderOut(OrderOut):
    user: Optional[OrderBuyer] = None


# =====================================================
# PAYMENTS
# =====================================================
class PaymentMethodOut(BaseModel):
    id: str
    name: str
    description: str
    icon: str


class PaymentMethods(BaseModel):
    methods: List[PaymentMethodOut]


class PaymentDetails(BaseModel):
    card_number: Optional[str] = None
    expiry_month: Optional[str] = None
    expiry_year: Optional[str] = None
    cvv: Optional[str] = None
    paypal_email: Optional[EmailStr] = None


class PaymentIn(BaseModel):
    order_id: int = Field(..., gt=0)
    payment_details: Optional[PaymentDetails] = None


class PaymentOut(BaseModel):
    success: bool
    transaction_id: str
    order: OrderOut
