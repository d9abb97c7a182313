import logging
from typing import List

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from models.order import Order, OrderItem

logger = logging.getLogger(__name__)

def find_inconsistent_order_totals(db: Session) -> List[Order]:
    """Orders whose stored totals disagree with their items.

    An order is inconsistent when total_cents != subtotal + tax + shipping, or
    when subtotal_cents differs from the sum of its line totals. The database
    does not enforce either rule.
    """
    line_sum = (
        select(func.coalesce(func.sum(OrderItem.line_total_cents), 0))
        .where(OrderItem.order_id == Order.id)
        .scalar_subquery()
    )
    stmt = (
        select(Order)
        .where(
            or_(
                Order.total_cents != Order.subtotal_cents + Order.tax_cents + Order.shipping_cents,
                Order.subtotal_cents != line_sum,
            )
        )
        .order_by(Order.id)
    )
    orders = list(db.scalars(stmt))
    for order in orders:
        logger.warning(
            "Order %s totals out of sync: subtotal=%s tax=%s shipping=%s total=%s",
            order.id, order.subtotal_cents, order.tax_cents, order.shipping_cents, order.total_cents,
        )
    return orders
