from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import BusinessRuleError, ForbiddenError, NotFoundError
from storefront.domain.schemas import UserCreate, UserUpdate
from storefront.repos.user_repo import UserRepo
from storefront.services import page_of
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserModel:
        email = payload.email.lower()
        if self.repo.get_by_email(email):
            raise BusinessRuleError("Email already exists", "EMAIL_EXISTS")

        user = UserModel(
            email=email,
            first_name=payload.first_name,
            last_name=payload.last_name,
            avatar=payload.avatar,
            role="user",
            status="active",
        )
        created = self.repo.create_user(user)
        logger.info(f"Created user {created.id} ({created.email})")
        return created

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_active_user(self, user_id: int) -> UserModel:
        """Użytkownik wykonujący zapytanie - musi istnieć i być aktywny."""
        user = self.get_user(user_id)
        if user.status != "active":
            raise ForbiddenError(f"Account is {user.status}", "ACCOUNT_NOT_ACTIVE")
        return user

    def list_users(
        self,
        page: int,
        page_size: int,
        search: Optional[str] = None,
        role: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Dict[str, Any]:
        rows, total = self.repo.list_users(
            offset=(page - 1) * page_size,
            limit=page_size,
            search=search,
            role=role,
            status=status,
        )
        return page_of(rows, page, page_size, total)

    def update_user(self, user_id: int, payload: UserUpdate) -> UserModel:
        user = self.get_user(user_id)
        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(user, field, value)
        return self.repo.save(user)

    def delete_user(self, acting_user_id: int, user_id: int) -> None:
        if acting_user_id == user_id:
            raise BusinessRuleError("Cannot delete your own account", "SELF_DELETE")
        user = self.get_user(user_id)
        self.repo.delete_user(user)
        logger.info(f"User {user_id} deleted by {acting_user_id}")
