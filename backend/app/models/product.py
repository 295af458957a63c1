"""
product.py — In-Memory Model for Catalog Products
"""

import datetime

from app.models.base import Record


class Product(Record):
    id: str
    name: str
    description: str = ""
    price: float
    in_stock: bool = True
    created_at: datetime.datetime
