"""
SQLAlchemy ORM models for the Bookshelf Reader API.

Tables:
    users        — authenticated principals (readers and admins)
    books        — catalog entries with an optional digital-content descriptor
    orders       — checkout records; status drives entitlement
    order_items  — books listed on an order
"""
import uuid
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Float, Boolean, DateTime, Text, ForeignKey, JSON,
    UniqueConstraint, Index,
)
from sqlalchemy.orm import relationship

from database import Base


def new_id() -> str:
    """Opaque 32-char hex identifier."""
    return uuid.uuid4().hex


class User(Base):
    """Accounts known to the marketplace."""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=True)
    username = Column(String(100), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    orders = relationship("Order", back_populates="user", lazy="select")


class Book(Base):
    """
    Catalog entry.

    The digital-content descriptor is stored flat (content_* columns);
    content_type selects which locator column is authoritative.
    """
    __tablename__ = "books"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(300), nullable=False)
    author = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    publisher = Column(String(200), nullable=True)
    isbn = Column(String(20), nullable=True)
    published_date = Column(DateTime, nullable=True)
    page_count = Column(Integer, nullable=True)
    language = Column(String(50), nullable=False, default="English")
    cover_image = Column(Text, nullable=True)

    price = Column(Float, nullable=True)
    is_free = Column(Boolean, nullable=False, default=False)

    target_audience = Column(String(20), nullable=False)  # "kids" | "adults" | "higher-education"
    age_min = Column(Integer, nullable=True)
    age_max = Column(Integer, nullable=True)
    formats = Column(JSON, nullable=False, default=lambda: ["digital"])

    # Digital content descriptor
    has_content = Column(Boolean, nullable=False, default=False)
    content_type = Column(String(20), nullable=False, default="pdf")
    content_url = Column(Text, nullable=True)
    file_name = Column(String(255), nullable=True)
    file_size = Column(Integer, nullable=True)
    doi_number = Column(String(255), nullable=True)
    external_link = Column(Text, nullable=True)
    link_description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Order(Base):
    """Checkout record. Status is moved forward by fulfillment only."""
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")
    ordered_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )

    __table_args__ = (
        # Entitlement lookups filter by owner and status
        Index("ix_orders_user_status", "user_id", "status"),
    )


class OrderItem(Base):
    """One book line on an order. product_id may repeat across orders, never within one."""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(32), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(32), nullable=False, index=True)
    name = Column(String(300), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    position = Column(Integer, nullable=False, default=0)

    order = relationship("Order", back_populates="items")

    __table_args__ = (
        UniqueConstraint("order_id", "product_id", name="uq_order_item_product"),
    )
