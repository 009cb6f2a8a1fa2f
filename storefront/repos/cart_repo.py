# storefront/repos/cart_repo.py
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_items(self, user_id: int) -> List[CartItemModel]:
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.id)
        )
        return list(self.db.execute(stmt).unique().scalars().all())

    def get_cart_item(self, item_id: int, user_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.id == item_id,
                CartItemModel.user_id == user_id,
            )
        ).unique().scalar_one_or_none()

    def get_cart_item_by_product(self, user_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        ).unique().scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.commit()

    def clear_cart(self, user_id: int, commit: bool = True) -> None:
        self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if commit:
            self.db.commit()
