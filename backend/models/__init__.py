# Import every model so SQLAlchemy registers its table on Base.metadata

from models.users import User, UserRole
from models.product import Product
from models.cart import Cart, CartItem, CartStatus
from models.order import Order, OrderItem, OrderStatus

__all__ = [
    "User", "UserRole",
    "Product",
    "Cart", "CartItem", "CartStatus",
    "Order", "OrderItem", "OrderStatus",
]
