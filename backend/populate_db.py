import json
import logging
import os
import sys
from typing import Iterable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

# Database models and setup
from config import settings
from database import SessionLocal
from models.users import User
from models.product import Product
from models.cart import Cart, CartItem
from models.order import Order, OrderItem
from schemas.seed import SeedData, UserSeed, ProductSeed, CartSeed, OrderSeed

logger = logging.getLogger(__name__)


def load_fixtures(path: Optional[str] = None) -> SeedData:
    """Reads and validates the seed fixture file (defaults to settings.SEED_FILE)."""
    path = path or settings.SEED_FILE
    with open(path, encoding="utf-8") as fh:
        return SeedData.model_validate(json.load(fh))


def _user_by_email(db: Session, email: str) -> User:
    user = db.scalar(select(User).where(User.email == email))
    if user is None:
        raise LookupError(f"Seed references unknown user {email!r}")
    return user


def _product_by_sku(db: Session, sku: str) -> Product:
    product = db.scalar(select(Product).where(Product.sku == sku))
    if product is None:
        raise LookupError(f"Seed references unknown product SKU {sku!r}")
    return product


def seed_users(db: Session, users: Iterable[UserSeed]) -> int:
    count = 0
    for u in users:
        exists = db.scalar(select(User.id).where(User.email == u.email))
        if exists:
            logger.debug("User %s already present, skipping", u.email)
            continue
        db.add(User(**u.model_dump(mode="json")))
        count += 1
    db.flush()
    return count


def seed_products(db: Session, products: Iterable[ProductSeed]) -> int:
    count = 0
    for p in products:
        # SKU is the natural key; products without one are matched by name
        if p.sku is not None:
            exists = db.scalar(select(Product.id).where(Product.sku == p.sku))
        else:
            exists = db.scalar(select(Product.id).where(Product.sku.is_(None), Product.name == p.name))
        if exists:
            logger.debug("Product %s already present, skipping", p.sku or p.name)
            continue
        db.add(Product(**p.model_dump(mode="json")))
        count += 1
    db.flush()
    return count


def seed_carts(db: Session, carts: Iterable[CartSeed]) -> int:
    """Creates the carts and their items; returns the number of items inserted.

    Item unit prices are snapshotted from the product's current price.
    """
    count = 0
    for c in carts:
        user = _user_by_email(db, c.user_email)
        cart = db.scalar(select(Cart).where(Cart.user_id == user.id, Cart.status == c.status.value))
        if cart is None:
            cart = Cart(user=user, status=c.status.value)
            db.add(cart)
            db.flush()

        for line in c.items:
            product = _product_by_sku(db, line.sku)
            exists = db.scalar(
                select(CartItem.id).where(CartItem.cart_id == cart.id, CartItem.product_id == product.id)
            )
            if exists:
                continue
            db.add(CartItem(
                cart=cart,
                product=product,
                quantity=line.quantity,
                unit_price_cents=product.price_cents,
            ))
            count += 1
    db.flush()
    return count


def seed_orders(db: Session, orders: Iterable[OrderSeed]) -> int:
    """Creates the orders with their items; totals are left for recompute_order_totals()."""
    count = 0
    for o in orders:
        user = _user_by_email(db, o.user_email)
        # Orders have no natural key: an existing order of the same status counts as seeded
        exists = db.scalar(select(Order.id).where(Order.user_id == user.id, Order.status == o.status.value))
        if exists:
            logger.debug("Order for %s (%s) already present, skipping", o.user_email, o.status.value)
            continue

        order = Order(
            user=user,
            status=o.status.value,
            subtotal_cents=0,
            tax_cents=o.tax_cents,
            shipping_cents=o.shipping_cents,
            total_cents=0,
            currency=o.currency,
        )
        # Added before the lookups below, which autoflush on an autoflush session
        db.add(order)
        for line in o.items:
            product = _product_by_sku(db, line.sku)
            order.items.append(OrderItem(
                product=product,
                quantity=line.quantity,
                unit_price_cents=product.price_cents,
                line_total_cents=product.price_cents * line.quantity,
            ))
        count += 1
    db.flush()
    return count


def recompute_order_totals(db: Session) -> int:
    """Sets subtotal from the order's line totals and total = subtotal + tax + shipping.

    Only orders that have items are touched. Returns the number of updated rows.
    """
    subtotal = (
        select(func.sum(OrderItem.line_total_cents))
        .where(OrderItem.order_id == Order.id)
        .scalar_subquery()
    )
    stmt = (
        update(Order)
        .where(Order.items.any())
        .values(
            subtotal_cents=subtotal,
            total_cents=subtotal + Order.tax_cents + Order.shipping_cents,
        )
        .execution_options(synchronize_session=False)
    )
    db.flush()
    result = db.execute(stmt)

    # Orders already loaded in the session still hold the old totals
    for obj in list(db.identity_map.values()):
        if isinstance(obj, Order):
            db.expire(obj, ["subtotal_cents", "total_cents"])
    return result.rowcount


def seed_database(db: Session, data: SeedData) -> dict:
    """Inserts every fixture in foreign-key order. The caller commits."""
    counts = {
        "users": seed_users(db, data.users),
        "products": seed_products(db, data.products),
        "cart_items": seed_carts(db, data.carts),
        "orders": seed_orders(db, data.orders),
    }
    counts["recomputed_orders"] = recompute_order_totals(db)
    return counts


def populate_database(path: Optional[str] = None) -> dict:
    """Main execution function to populate database."""
    data = load_fixtures(path)
    session = SessionLocal()
    try:
        counts = seed_database(session, data)
        session.commit()
        return counts
    except SQLAlchemyError:
        session.rollback()
        raise
    finally:
        session.close()


def main():
    print("📥 Seeding database...")
    try:
        counts = populate_database()
    except FileNotFoundError:
        print(f"Seed file not found: {settings.SEED_FILE}")
        sys.exit(1)
    except (LookupError, ValueError, SQLAlchemyError) as e:
        print(f"❌ Seeding failed: {e}")
        sys.exit(1)

    print(
        f"✅ Inserted {counts['users']} users, {counts['products']} products, "
        f"{counts['cart_items']} cart items, {counts['orders']} orders."
    )


if __name__ == "__main__":
    main()
