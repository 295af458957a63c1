"""
orders.py — Order Engine (Pricing + In-Memory Order Log)

Purpose:
- Price an order against the current catalog and record it for the user.
- List a user's orders, oldest first.

Pricing rules:
- Items are resolved in submission order. The first unknown productId aborts
  the whole order (InvalidProduct) and nothing is recorded.
- total = Σ price × qty, computed in Decimal from each price's shortest repr
  and rounded once, half-up, to cents. 2 × 10.00 + 1 × 5.005 == 25.01.
- A total too large for a finite float is rejected (ValidationFailed on
  `items`) and nothing is recorded.
- Resolution and recording happen while the catalog lock is held, so the
  prices used are one consistent snapshot.
"""

import datetime
import math
import threading
import uuid
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, ROUND_HALF_UP, Context, Decimal, localcontext
from typing import Dict, Iterable, List, Sequence

from app.core.errors import InvalidProduct, ValidationFailed
from app.core.logging import get_logger
from app.models.order import Order, OrderItem
from app.services.catalog import CatalogStore

logger = get_logger(__name__)

CENTS = Decimal("0.01")


def compute_total(lines: Iterable[tuple]) -> Decimal:
    """
    Sum (price, qty) pairs and round the result half-up to cents.

    Prices go through repr() so a float like 5.005 is read as the decimal
    the client sent, not its binary approximation.
    """
    # Unbounded context: the sum is exact however large the operands are
    with localcontext(Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)):
        subtotal = sum(
            (Decimal(repr(price)) * qty for price, qty in lines),
            Decimal("0"),
        )
        return subtotal.quantize(CENTS, rounding=ROUND_HALF_UP)


class OrderEngine:
    def __init__(self, catalog: CatalogStore):
        self._catalog = catalog
        self._lock = threading.RLock()
        self._orders: List[Order] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)

    def place_order(self, user_id: str, items: Sequence[Dict]) -> Order:
        """
        Args:
            user_id: owner of the new order
            items: [{"product_id": str, "qty": int}, ...], already validated

        Raises:
            InvalidProduct: an item references a product that does not exist
            ValidationFailed: the total does not fit a finite float
        """
        order_items = [OrderItem(product_id=i["product_id"], qty=i["qty"]) for i in items]

        with self._catalog.locked() as catalog:
            lines = []
            for item in order_items:
                product = catalog.find(item.product_id)
                if product is None:
                    logger.info("Order rejected for user %s: unknown product %s", user_id, item.product_id)
                    raise InvalidProduct(item.product_id)
                lines.append((product.price, item.qty))

            total = float(compute_total(lines))
            if not math.isfinite(total):
                logger.info("Order rejected for user %s: total out of range", user_id)
                raise ValidationFailed(details=[{"path": "items", "message": "Order total is too large"}])

            order = Order(
                id=str(uuid.uuid4()),
                user_id=user_id,
                items=order_items,
                total=total,
                created_at=datetime.datetime.now(datetime.timezone.utc),
            )
            with self._lock:
                self._orders.append(order)

        logger.info("Placed order %s for user %s total=%.2f", order.id, user_id, order.total)
        return order

    def list_for_user(self, user_id: str) -> List[Order]:
        with self._lock:
            return [o for o in self._orders if o.user_id == user_id]
