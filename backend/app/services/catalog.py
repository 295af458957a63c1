"""
catalog.py — Catalog Store (In-Memory Product Table)

Purpose:
- Hold the product catalog for the life of the process.
- Create / merge-update / delete on behalf of admin routes.
- Serve full snapshots to readers (no filtering, no pagination).

Products keep insertion order. All mutations hold the store lock, and
`locked()` lets the order engine price a whole order against a catalog that
cannot change underneath it.
"""

import datetime
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from app.core.errors import NotFound
from app.core.logging import get_logger
from app.models.product import Product

logger = get_logger(__name__)

# Fields a merge update may overwrite
UPDATABLE_FIELDS = ("name", "description", "price", "in_stock")


class CatalogStore:
    def __init__(self):
        self._lock = threading.RLock()
        self._products: Dict[str, Product] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    @contextmanager
    def locked(self) -> Iterator["CatalogStore"]:
        with self._lock:
            yield self

    def list(self) -> List[Product]:
        with self._lock:
            return list(self._products.values())

    def find(self, product_id: str) -> Optional[Product]:
        with self._lock:
            return self._products.get(product_id)

    def get(self, product_id: str) -> Product:
        """
        Raises:
            NotFound: no product with this id
        """
        product = self.find(product_id)
        if product is None:
            raise NotFound("Product not found")
        return product

    def create(self, fields: Dict[str, Any]) -> Product:
        """
        Create a product from validated fields. Assigns `id` and `created_at`.
        """
        product = Product(
            id=str(uuid.uuid4()),
            created_at=datetime.datetime.now(datetime.timezone.utc),
            **fields,
        )
        with self._lock:
            self._products[product.id] = product
        logger.info("Created product %s", product.id)
        return product

    def update(self, product_id: str, fields: Dict[str, Any]) -> Product:
        """
        Merge `fields` into the product. Fields not present keep their value.

        Raises:
            NotFound: no product with this id
        """
        changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        with self._lock:
            current = self._products.get(product_id)
            if current is None:
                raise NotFound("Product not found")
            updated = current.model_copy(update=changes)
            self._products[product_id] = updated
        logger.info("Updated product %s fields=%s", product_id, sorted(changes))
        return updated

    def delete(self, product_id: str) -> None:
        """
        Raises:
            NotFound: no product with this id
        """
        with self._lock:
            if self._products.pop(product_id, None) is None:
                raise NotFound("Product not found")
        logger.info("Deleted product %s", product_id)
