from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import ok, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CategoryCreate, CategoryOut, CategoryUpdate, Envelope, MessageOut
from storefront.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=Envelope[List[CategoryOut]])
def list_categories(db: Session = Depends(get_db)):
    return ok(CategoryService(db).list_categories())


@router.get("/{category_id}", response_model=Envelope[CategoryOut])
def get_category(category_id: int, db: Session = Depends(get_db)):
    return ok(CategoryService(db).get_category(category_id))


@router.post("", response_model=Envelope[CategoryOut], status_code=201)
def create_category(
    payload: CategoryCreate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ok(CategoryService(db).create_category(payload))


@router.put("/{category_id}", response_model=Envelope[CategoryOut])
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ok(CategoryService(db).update_category(category_id, payload))


@router.delete("/{category_id}", response_model=Envelope[MessageOut])
def delete_category(
    category_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    CategoryService(db).delete_category(category_id)
    return ok({"message": "Category deleted successfully"})
