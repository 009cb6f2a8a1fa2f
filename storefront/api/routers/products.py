# storefront/api/routers/products.py
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import Paging, get_current_user, ok, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import (
    Envelope,
    MessageOut,
    Page,
    ProductCreate,
    ProductList,
    ProductOut,
    ProductSort,
    ProductUpdate,
    ReviewCreate,
    ReviewOut,
)
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=Envelope[Page[ProductOut]])
def list_products(
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    category_id: Optional[int] = Query(None, gt=0),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    search: Optional[str] = Query(None),
    featured: bool = Query(False),
    in_stock: bool = Query(False),
    sort_by: ProductSort = Query("newest"),
    db: Session = Depends(get_db),
):
    return ok(
        ProductService(db).list_products(
            page,
            page_size,
            category_id=category_id,
            min_price=min_price,
            max_price=max_price,
            search=search,
            featured=featured,
            in_stock=in_stock,
            sort_by=sort_by,
        )
    )


@router.get("/featured", response_model=Envelope[ProductList])
def featured_products(limit: int = Query(8, ge=1, le=50), db: Session = Depends(get_db)):
    return ok({"products": ProductService(db).featured_products(limit)})


@router.get("/search", response_model=Envelope[Page[ProductOut]])
def search_products(
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return ok(ProductService(db).search_products(q, page, page_size))


@router.get("/{product_id}", response_model=Envelope[ProductOut])
def get_product(product_id: int, db: Session = Depends(get_db)):
    return ok(ProductService(db).get_product(product_id))


@router.get("/{product_id}/reviews", response_model=Envelope[Page[ReviewOut]])
def list_reviews(product_id: int, paging: Paging = Depends(), db: Session = Depends(get_db)):
    return ok(ProductService(db).list_reviews(product_id, paging.page, paging.page_size))


@router.post("/{product_id}/reviews", response_model=Envelope[ReviewOut], status_code=201)
def add_review(
    product_id: int,
    payload: ReviewCreate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(ProductService(db).add_review(user.id, product_id, payload))


@router.post("", response_model=Envelope[ProductOut], status_code=201)
def create_product(
    payload: ProductCreate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ok(ProductService(db).create_product(payload))


@router.put("/{product_id}", response_model=Envelope[ProductOut])
def update_product(
    product_id: int,
    payload: ProductUpdate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ok(ProductService(db).update_product(product_id, payload))


@router.delete("/{product_id}", response_model=Envelope[MessageOut])
def delete_product(
    product_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    ProductService(db).delete_product(product_id)
    return ok({"message": "Product deleted successfully"})
