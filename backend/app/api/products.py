"""
products.py — Product Catalog Endpoints (API Layer)

Reads are public. Writes need a bearer token whose role is exactly "admin".
Write routes validate the body before checking the token.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_catalog, require_role, validated_body
from app.core.security import SessionClaims
from app.models.product import Product
from app.models.user import ADMIN_ROLE
from app.services.catalog import CatalogStore
from app.validation.shapes import ProductCreateRequest, ProductUpdateRequest

router = APIRouter(
    prefix="/products",
    tags=["products"]
)

require_admin = require_role(ADMIN_ROLE)


@router.get("", response_model=List[Product])
async def list_products(catalog: CatalogStore = Depends(get_catalog)):
    return catalog.list()


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str, catalog: CatalogStore = Depends(get_catalog)):
    return catalog.get(product_id)


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreateRequest = Depends(validated_body(ProductCreateRequest)),
    claims: SessionClaims = Depends(require_admin),
    catalog: CatalogStore = Depends(get_catalog),
):
    return catalog.create(payload.normalized())


@router.patch("/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    payload: ProductUpdateRequest = Depends(validated_body(ProductUpdateRequest)),
    claims: SessionClaims = Depends(require_admin),
    catalog: CatalogStore = Depends(get_catalog),
):
    """
    Merge update: only fields present in the body change.
    """
    return catalog.update(product_id, payload.normalized())


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_product(
    product_id: str,
    claims: SessionClaims = Depends(require_admin),
    catalog: CatalogStore = Depends(get_catalog),
):
    catalog.delete(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
