"""
order.py — In-Memory Model for Placed Orders

An order is written once, when it is placed, and never changes afterwards.
`total` is fixed from the product prices at placement time; later catalog
edits or deletions do not touch it.
"""

import datetime
from typing import List

from app.models.base import Record


class OrderItem(Record):
    product_id: str
    qty: int


class Order(Record):
    id: str
    user_id: str
    items: List[OrderItem]
    total: float
    created_at: datetime.datetime
