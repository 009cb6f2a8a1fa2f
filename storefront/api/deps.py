# storefront/api/deps.py
from functools import lru_cache

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ForbiddenError
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.user_service import UserService


@lru_cache
def get_lock_service() -> LockService:
    # jeden klient Redis (pula połączeń) na proces
    return LockService()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_current_user(
    user_id: int = Query(..., gt=0, description="ID użytkownika wykonującego zapytanie"),
    db: Session = Depends(get_db),
) -> UserModel:
    return UserService(db).get_active_user(user_id)


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if user.role != "admin":
        raise ForbiddenError("Insufficient permissions")
    return user


class Paging:
    def __init__(
        self,
        page: int = Query(1, ge=1),
        page_size: int = Query(10, ge=1, le=100),
    ):
        self.page = page
        self.page_size = page_size


def ok(data) -> dict:
    return {"success": True, "data": data}
