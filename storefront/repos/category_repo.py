from typing import List

from sqlalchemy import select, exists
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_categories(self) -> List[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.id)).scalars().all())

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_by_slug(self, slug: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()

    def has_products(self, category_id: int) -> bool:
        return self.db.execute(
            select(exists().where(ProductModel.category_id == category_id))
        ).scalar()

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def save(self, category: CategoryModel) -> CategoryModel:
        self.db.commit()
        self.db.refresh(category)
        return category

    def delete_category(self, category: CategoryModel) -> None:
        self.db.delete(category)
        self.db.commit()
