# backend/models/users.py
import enum
from sqlalchemy import Column, Text, Boolean, DateTime, CheckConstraint, Index, func, true
from sqlalchemy.orm import relationship
from database import Base, BigIntId, enum_check

# Roles a user account can hold
class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"

# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(BigIntId, primary_key=True)
    email = Column(Text, unique=True, nullable=False)
    password_hash = Column(Text, nullable=False) # Placeholder in seed data, hashed by the application
    full_name = Column(Text, nullable=True)
    role = Column(Text, nullable=False, default=UserRole.CUSTOMER.value, server_default=UserRole.CUSTOMER.value)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Carts go with the user; orders block the delete (ON DELETE RESTRICT)
    carts = relationship("Cart", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    orders = relationship("Order", back_populates="user", passive_deletes="all")

    __table_args__ = (
        CheckConstraint(enum_check("role", UserRole), name="ck_users_role"),
        Index("idx_users_role", "role"),
    )
