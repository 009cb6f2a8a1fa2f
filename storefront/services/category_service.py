from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.domain.errors import BusinessRuleError, NotFoundError
from storefront.domain.schemas import CategoryCreate, CategoryUpdate
from storefront.repos.category_repo import CategoryRepo
from storefront.utils.text import slugify


class CategoryService:
    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)

    def list_categories(self) -> List[CategoryModel]:
        return self.repo.list_categories()

    def get_category(self, category_id: int) -> CategoryModel:
        category = self.repo.get_category(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def _ensure_slug_free(self, slug: str, category_id: int | None = None):
        existing = self.repo.get_by_slug(slug)
        if existing and existing.id != category_id:
            raise BusinessRuleError("Category slug already exists", "SLUG_EXISTS")

    def create_category(self, payload: CategoryCreate) -> CategoryModel:
        slug = payload.slug or slugify(payload.name)
        self._ensure_slug_free(slug)

        return self.repo.create_category(
            CategoryModel(
                name=payload.name,
                slug=slug,
                description=payload.description,
                image=payload.image,
                parent_id=payload.parent_id,
            )
        )

    def update_category(self, category_id: int, payload: CategoryUpdate) -> CategoryModel:
        category = self.get_category(category_id)
        data = payload.model_dump(exclude_unset=True)

        if data.get("name"):
            category.name = data["name"]
            slug = data.get("slug") or slugify(data["name"])
            self._ensure_slug_free(slug, category.id)
            category.slug = slug
        elif data.get("slug"):
            self._ensure_slug_free(data["slug"], category.id)
            category.slug = data["slug"]

        for field in ("description", "image", "parent_id"):
            if field in data:
                setattr(category, field, data[field])

        return self.repo.save(category)

    def delete_category(self, category_id: int) -> None:
        category = self.get_category(category_id)
        if self.repo.has_products(category_id):
            raise BusinessRuleError("Cannot delete category with products", "HAS_PRODUCTS")
        self.repo.delete_category(category)
