from typing import List, Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.repos import fetch_page


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email.lower())
        ).scalar_one_or_none()

    def list_users(
        self,
        offset: int,
        limit: int,
        search: Optional[str] = None,
        role: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[UserModel], int]:
        stmt = select(UserModel)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    UserModel.email.ilike(pattern),
                    UserModel.first_name.ilike(pattern),
                    UserModel.last_name.ilike(pattern),
                )
            )
        if role:
            stmt = stmt.where(UserModel.role == role)
        if status:
            stmt = stmt.where(UserModel.status == status)
        return fetch_page(self.db, stmt.order_by(UserModel.id), offset, limit)

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save(self, user: UserModel) -> UserModel:
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_user(self, user: UserModel) -> None:
        self.db.delete(user)
        self.db.commit()
