import enum
from decimal import Decimal
from datetime import datetime
from typing import List, Optional
from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, ForeignKey, Integer, Numeric, Text, UniqueConstraint
from sqlmodel import Column, SQLModel, Field, String
from nextchapter.common.utils import now


class UserRoleName(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class OrderPaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    REFUNDED = "refunded"


class DeliveryStatus(str, enum.Enum):
    ORDER_PLACED = "Order Placed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


# id is the subject issued by the external identity provider , rows are provisioned on first authenticated request
class Users(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(sa_column=Column(String(128), primary_key=True))
    email: Optional[str] = Field(default=None, sa_column=Column(String(320), nullable=True))
    first_name: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    last_name: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    role: str = Field(default=UserRoleName.USER.value, sa_column=Column(String(32), nullable=False, default=UserRoleName.USER.value))
    is_disabled: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    created_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False,default=now))
    updated_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False,default=now, onupdate=now))
    last_seen_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))


class Book(SQLModel, table=True):
    __tablename__ = "books"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(sa_column=Column(String(512), nullable=False, index=True))
    authors: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text(), nullable=True))
    thumbnail: Optional[str] = Field(default=None, sa_column=Column(String(1024), nullable=True))
    isbn: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True, unique=True))
    price: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(10, 2), nullable=False))
    discount: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))  # percent
    stock: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    category: str = Field(default="uncategorized", sa_column=Column(String(128), nullable=False, index=True))
    total_sold: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    rating: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(2, 1), nullable=False, default=0))
    rating_count: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    pages: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    created_at: datetime = Field(default_factory=now, sa_column=Column(DateTime(timezone=True), nullable=False, default=now))


# one row per (user, book) , the price/discount/title columns are the snapshot the user saw when adding
class CartLine(SQLModel, table=True):
    __tablename__ = "cart"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(sa_column=Column(String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True))
    book_id: int = Field(sa_column=Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False))
    title: str = Field(sa_column=Column(String(512), nullable=False))
    authors: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    thumbnail: Optional[str] = Field(default=None, sa_column=Column(String(1024), nullable=True))
    original_price: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))
    discount: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    quantity: int = Field(default=1, sa_column=Column(Integer, nullable=False, default=1))
    created_at: datetime = Field(default_factory=now, sa_column=Column(DateTime(timezone=True), nullable=False, default=now))

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_cart_user_book"),
    )


class WishlistEntry(SQLModel, table=True):
    __tablename__ = "wishlists"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(sa_column=Column(String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True))
    book_id: int = Field(sa_column=Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False))
    created_at: datetime = Field(default_factory=now, sa_column=Column(DateTime(timezone=True), nullable=False, default=now))

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_wishlist_user_book"),
    )

# -----------------------------------------------------------------------------------------------------------------------

class Payment(SQLModel, table=True):
    __tablename__ = "payments"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(sa_column=Column(String(128), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True))
    gateway_order_id: str = Field(sa_column=Column(String(128), nullable=False, unique=True, index=True))
    gateway_payment_id: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    amount: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))  # major units (rs)
    currency: str = Field(default="INR", sa_column=Column(String(8), nullable=False, default="INR"))
    status: str = Field(default=PaymentStatus.PENDING.value, sa_column=Column(String(16), nullable=False, index=True, default=PaymentStatus.PENDING.value))
    created_at: datetime = Field(default_factory=now, sa_column=Column(DateTime(timezone=True), nullable=False, default=now))
    updated_at: datetime = Field(default_factory=now,sa_column=Column(DateTime(timezone=True), nullable=False,default=now, onupdate=now))


class Orders(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(sa_column=Column(String(128), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True))
    payment_id: int = Field(sa_column=Column(Integer, ForeignKey("payments.id", ondelete="RESTRICT"), nullable=False, unique=True))
    payment_status: str = Field(default=OrderPaymentStatus.PENDING.value, sa_column=Column(String(16), nullable=False, index=True))
    delivery_status: str = Field(default=DeliveryStatus.ORDER_PLACED.value, sa_column=Column(String(32), nullable=False, index=True))
    shipping_address: str = Field(sa_column=Column(Text(), nullable=False))
    tracking_number: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    created_at: datetime = Field(default_factory=now, sa_column=Column(DateTime(timezone=True), nullable=False, default=now))
    updated_at: datetime = Field(default_factory=now,sa_column=Column(DateTime(timezone=True), nullable=False,default=now, onupdate=now))
    estimated_delivery_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    delivered_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    is_reviewed: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))


# immutable once written , price_at_time is the discounted unit price from the cart snapshot
class OrderItem(SQLModel, table=True):
    __tablename__ = "order_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(sa_column=Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True))
    book_id: int = Field(sa_column=Column(Integer, ForeignKey("books.id", ondelete="RESTRICT"), nullable=False))
    quantity: int = Field(sa_column=Column(Integer, nullable=False))
    price_at_time: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))

    __table_args__ = (
        UniqueConstraint("order_id", "book_id", name="uq_order_book"),
    )


class Review(SQLModel, table=True):
    __tablename__ = "reviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(sa_column=Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True))
    book_id: int = Field(sa_column=Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True))
    user_id: str = Field(sa_column=Column(String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False))
    rating: int = Field(sa_column=Column(Integer, nullable=False))
    created_at: datetime = Field(default_factory=now, sa_column=Column(DateTime(timezone=True), nullable=False, default=now))

    __table_args__ = (
        UniqueConstraint("order_id", "book_id", "user_id", name="uq_review_order_book_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )


CORE_ORDER_TABLES = ("payments", "orders", "order_items")
