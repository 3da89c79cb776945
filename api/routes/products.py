"""
api/routes/products.py -- Product CRUD routes, scoped to the caller.

Routes:
  GET    /products        -- list the caller's products
  POST   /products        -- create a product owned by the caller
  GET    /products/{id}   -- one product (caller's only)
  PUT    /products/{id}   -- change name/description/price (caller's only)
  DELETE /products/{id}   -- remove a product (caller's only)

Every route depends on get_current_user_id, so a missing or invalid token
is rejected with 401 before any store call. The user id from the token is
the only owner id ever passed to ProductStore.

IDOR guard: the store's WHERE clause requires both id and owner_id to match.
A product owned by someone else returns the same 404 as one that does not
exist, so ids cannot be probed.
"""

import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import DeleteResponse, ProductCreate, ProductResponse, ProductUpdate
from auth.dependencies import get_current_user_id
from catalog.models import Product
from catalog.store import ProductStore

router = APIRouter()


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _bad_request(code: str, message: str) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": code, "message": message})


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail={"code": "not_found", "message": "Product not found"})


def _check_price(price: Optional[float]) -> float:
    if price is None or not math.isfinite(price) or price < 0:
        raise _bad_request("invalid_price", "Price must be a valid number")
    return price


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------


@router.get("/products", response_model=list[ProductResponse])
def list_products(
    request: Request,
    user_id: str = Depends(get_current_user_id),
) -> list[ProductResponse]:
    """Return every product owned by the caller. No pagination."""
    store: ProductStore = request.app.state.product_store
    return [ProductResponse.from_product(p) for p in store.list_products(user_id)]


@router.post("/products", response_model=ProductResponse, status_code=201)
def create_product(
    request: Request,
    body: ProductCreate,
    user_id: str = Depends(get_current_user_id),
) -> ProductResponse:
    """Create a product. Name and a non-negative price are required."""
    if not body.name or body.price is None:
        raise _bad_request("missing_fields", "Name and price are required")
    price = _check_price(body.price)

    store: ProductStore = request.app.state.product_store
    created = store.create_product(
        Product(owner_id=user_id, name=body.name, description=body.description, price=price)
    )
    return ProductResponse.from_product(created)


# ---------------------------------------------------------------------------
# Single product
# ---------------------------------------------------------------------------


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(
    request: Request,
    product_id: str,
    user_id: str = Depends(get_current_user_id),
) -> ProductResponse:
    store: ProductStore = request.app.state.product_store
    product = store.get_product(product_id, user_id)
    if product is None:
        raise _not_found()
    return ProductResponse.from_product(product)


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    request: Request,
    product_id: str,
    body: ProductUpdate,
    user_id: str = Depends(get_current_user_id),
) -> ProductResponse:
    """Apply the supplied fields to one of the caller's products.

    Fields absent from the JSON body are left unchanged. description may be
    set to null to clear it; name and price may not.
    """
    changes = body.model_dump(include=body.model_fields_set)
    if not changes:
        raise _bad_request("no_changes", "No fields to update")
    if "name" in changes and not changes["name"]:
        raise _bad_request("missing_fields", "Name and price are required")
    if "price" in changes:
        changes["price"] = _check_price(changes["price"])

    store: ProductStore = request.app.state.product_store
    updated = store.update_product(product_id, user_id, **changes)
    if updated is None:
        raise _not_found()
    return ProductResponse.from_product(updated)


@router.delete("/products/{product_id}", response_model=DeleteResponse)
def delete_product(
    request: Request,
    product_id: str,
    user_id: str = Depends(get_current_user_id),
) -> DeleteResponse:
    store: ProductStore = request.app.state.product_store
    if not store.delete_product(product_id, user_id):
        raise _not_found()
    return DeleteResponse()
