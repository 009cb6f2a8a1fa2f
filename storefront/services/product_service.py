# storefront/services/product_service.py
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.review import ReviewModel
from storefront.domain.errors import BusinessRuleError, NotFoundError
from storefront.domain.schemas import ProductCreate, ProductUpdate, ReviewCreate
from storefront.repos.category_repo import CategoryRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services import page_of
from storefront.utils.logging import get_logger
from storefront.utils.text import slugify

logger = get_logger(__name__)


class ProductService:
    """
    Katalog produktów: listowanie z filtrami, wyszukiwanie, recenzje
    oraz operacje admina (create, update, delete).
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.categories = CategoryRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def list_products(
        self,
        page: int,
        page_size: int,
        category_id: Optional[int] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        search: Optional[str] = None,
        featured: bool = False,
        in_stock: bool = False,
        sort_by: str = "newest",
    ) -> Dict[str, Any]:
        rows, total = self.repo.list_products(
            offset=(page - 1) * page_size,
            limit=page_size,
            category_id=category_id,
            min_price=min_price,
            max_price=max_price,
            search=search,
            featured=featured,
            in_stock=in_stock,
            sort_by=sort_by,
        )
        return page_of(rows, page, page_size, total)

    def featured_products(self, limit: int) -> List[ProductModel]:
        return self.repo.featured_products(limit)

    def search_products(self, query: Optional[str], page: int, page_size: int) -> Dict[str, Any]:
        if not query or len(query.strip()) < 2:
            raise BusinessRuleError("Search query must be at least 2 characters", "INVALID_QUERY")
        return self.list_products(page, page_size, search=query.strip())

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def list_reviews(self, product_id: int, page: int, page_size: int) -> Dict[str, Any]:
        self.get_product(product_id)
        rows, total = self.repo.list_reviews(product_id, (page - 1) * page_size, page_size)
        return page_of(rows, page, page_size, total)

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_review(self, user_id: int, product_id: int, payload: ReviewCreate) -> ReviewModel:
        product = self.get_product(product_id)

        if self.repo.get_user_review(user_id, product_id):
            raise BusinessRuleError("You have already reviewed this product", "ALREADY_REVIEWED")

        review = self.repo.add_review(
            ReviewModel(
                user_id=user_id,
                product_id=product_id,
                rating=payload.rating,
                title=payload.title,
                comment=payload.comment,
            )
        )

        # przelicz średnią i licznik recenzji
        avg, count = self.repo.review_stats(product_id)
        product.rating = Decimal(str(round(avg, 1)))
        product.review_count = count
        self.repo.commit()

        logger.info(f"Review {review.id} added to product {product_id}, rating now {product.rating}")
        return review

    def _unique_slug(self, name: str) -> str:
        base = slugify(name)
        slug = base
        counter = 1
        while self.repo.slug_exists(slug):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def _ensure_category(self, category_id: int):
        if not self.categories.get_category(category_id):
            raise BusinessRuleError("Category not found", "INVALID_CATEGORY")

    def create_product(self, payload: ProductCreate) -> ProductModel:
        self._ensure_category(payload.category_id)

        product = ProductModel(
            name=payload.name,
            slug=self._unique_slug(payload.name),
            description=payload.description,
            price=payload.price,
            original_price=payload.original_price,
            category_id=payload.category_id,
            stock=payload.stock,
            images=[str(url) for url in payload.images],
            featured=payload.featured,
            status=payload.status,
        )
        created = self.repo.create_product(product)
        logger.info(f"Created product {created.id} ({created.slug})")
        return created

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self.get_product(product_id)
        data = payload.model_dump(exclude_unset=True)

        if data.get("category_id"):
            self._ensure_category(data["category_id"])
        if data.get("name") and data["name"] != product.name:
            product.slug = self._unique_slug(data["name"])
        if data.get("images"):
            data["images"] = [str(url) for url in data["images"]]

        for field, value in data.items():
            if value is None and field != "original_price":
                continue
            setattr(product, field, value)

        return self.repo.save(product)

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        self.repo.delete_product(product)
        logger.info(f"Deleted product {product_id}")
