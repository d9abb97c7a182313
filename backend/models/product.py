# backend/models/product.py
from sqlalchemy import Column, Integer, Text, Boolean, DateTime, CheckConstraint, Index, func, true
from database import Base, BigIntId

# Catalog entry. Prices are integer cents in the product's currency.
class Product(Base):
    __tablename__ = "products"

    id = Column(BigIntId, primary_key=True)
    sku = Column(Text, unique=True, nullable=True) # Optional, unique when present
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)

    price_cents = Column(Integer, nullable=False)
    currency = Column(Text, nullable=False, default="USD", server_default="USD")
    image_url = Column(Text, nullable=True)

    stock_quantity = Column(Integer, nullable=False, default=0, server_default="0")
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="ck_products_price_cents"),
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_quantity"),
        Index("idx_products_active", "is_active"),
    )


# Full-text search over name + description (PostgreSQL GIN index)
Index(
    "idx_products_name_search",
    func.to_tsvector(
        "english",
        func.coalesce(Product.name, "") + " " + func.coalesce(Product.description, ""),
    ),
    postgresql_using="gin",
).ddl_if(dialect="postgresql")
