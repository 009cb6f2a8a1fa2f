from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import Paging, get_current_user, ok, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import (
    Envelope,
    MessageOut,
    Page,
    UserCreate,
    UserRead,
    UserRole,
    UserStatus,
    UserUpdate,
)
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=Envelope[UserRead], status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    return ok(UserService(db).create_user(payload))


@router.get("", response_model=Envelope[Page[UserRead]])
def list_users(
    search: Optional[str] = Query(None),
    role: Optional[UserRole] = Query(None),
    status: Optional[UserStatus] = Query(None),
    paging: Paging = Depends(),
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ok(UserService(db).list_users(paging.page, paging.page_size, search, role, status))


@router.get("/{account_id}", response_model=Envelope[UserRead])
def get_user(
    account_id: int,
    current: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # zwykły użytkownik widzi tylko siebie
    if current.id != account_id and current.role != "admin":
        raise NotFoundError("User not found")
    return ok(UserService(db).get_user(account_id))


@router.put("/{account_id}", response_model=Envelope[UserRead])
def update_user(
    account_id: int,
    payload: UserUpdate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ok(UserService(db).update_user(account_id, payload))


@router.delete("/{account_id}", response_model=Envelope[MessageOut])
def delete_user(
    account_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    UserService(db).delete_user(admin.id, account_id)
    return ok({"message": "User deleted successfully"})
