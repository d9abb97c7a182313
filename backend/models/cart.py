# backend/models/cart.py
import enum
from sqlalchemy import Column, Integer, ForeignKey, Text, DateTime, CheckConstraint, UniqueConstraint, Index, func
from sqlalchemy.orm import relationship
from database import Base, BigIntId, enum_check, not_postgresql

class CartStatus(str, enum.Enum):
    ACTIVE = "active"
    CONVERTED = "converted"
    ABANDONED = "abandoned"

# Represents the user's shopping cart
class Cart(Base):
    __tablename__ = "carts"

    id = Column(BigIntId, primary_key=True)
    user_id = Column(BigIntId, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    status = Column(Text, nullable=False, default=CartStatus.ACTIVE.value, server_default=CartStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="carts")
    # One-to-many relationship with cart items
    items = relationship("CartItem", back_populates="cart", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        CheckConstraint(enum_check("status", CartStatus), name="ck_carts_status"),
        # One cart per (user, status); checked at commit when deferred on PostgreSQL
        UniqueConstraint(
            "user_id", "status", name="uq_carts_user_status",
            deferrable=True, initially="IMMEDIATE",
        ).ddl_if(dialect="postgresql"),
        UniqueConstraint("user_id", "status", name="uq_carts_user_status").ddl_if(callable_=not_postgresql),
        Index("idx_carts_user_id", "user_id"),
    )


# Represents a single item (product + quantity) within a cart
class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(BigIntId, primary_key=True)
    cart_id = Column(BigIntId, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(BigIntId, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price_cents = Column(Integer, nullable=False) # Product price at the moment of addition
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    cart = relationship("Cart", back_populates="items")
    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_cart_items_quantity"),
        CheckConstraint("unit_price_cents >= 0", name="ck_cart_items_unit_price_cents"),
        UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
        Index("idx_cart_items_cart_id", "cart_id"),
    )
