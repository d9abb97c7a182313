# backend/models/order.py
import enum
from sqlalchemy import Column, Integer, Text, ForeignKey, DateTime, CheckConstraint, UniqueConstraint, Index, func
from sqlalchemy.orm import relationship
from database import Base, BigIntId, enum_check

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

class Order(Base):
    __tablename__ = "orders"

    id = Column(BigIntId, primary_key=True)
    user_id = Column(BigIntId, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    status = Column(Text, nullable=False, default=OrderStatus.PENDING.value, server_default=OrderStatus.PENDING.value)

    # Money in cents; total_cents = subtotal_cents + tax_cents + shipping_cents
    subtotal_cents = Column(Integer, nullable=False)
    tax_cents = Column(Integer, nullable=False, default=0, server_default="0")
    shipping_cents = Column(Integer, nullable=False, default=0, server_default="0")
    total_cents = Column(Integer, nullable=False)
    currency = Column(Text, nullable=False, default="USD", server_default="USD")

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        CheckConstraint(enum_check("status", OrderStatus), name="ck_orders_status"),
        CheckConstraint("subtotal_cents >= 0", name="ck_orders_subtotal_cents"),
        CheckConstraint("tax_cents >= 0", name="ck_orders_tax_cents"),
        CheckConstraint("shipping_cents >= 0", name="ck_orders_shipping_cents"),
        CheckConstraint("total_cents >= 0", name="ck_orders_total_cents"),
    )


# Latest orders of a user first
Index("idx_orders_user_created_at", Order.user_id, Order.created_at.desc())


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(BigIntId, primary_key=True)
    order_id = Column(BigIntId, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(BigIntId, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price_cents = Column(Integer, nullable=False)
    line_total_cents = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity"),
        CheckConstraint("unit_price_cents >= 0", name="ck_order_items_unit_price_cents"),
        CheckConstraint("line_total_cents >= 0", name="ck_order_items_line_total_cents"),
        UniqueConstraint("order_id", "product_id", name="uq_order_items_order_product"),
        Index("idx_order_items_order_id", "order_id"),
    )
