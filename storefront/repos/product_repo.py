# storefront/repos/product_repo.py
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.review import ReviewModel
from storefront.repos import fetch_page

_SORTS = {
    "newest": (ProductModel.created_at.desc(), ProductModel.id.desc()),
    "price_asc": (ProductModel.price.asc(), ProductModel.id.asc()),
    "price_desc": (ProductModel.price.desc(), ProductModel.id.asc()),
    "name": (ProductModel.name.asc(), ProductModel.id.asc()),
    "rating": (ProductModel.rating.desc(), ProductModel.id.asc()),
}


def _search_clause(term: str):
    pattern = f"%{term}%"
    return or_(ProductModel.name.ilike(pattern), ProductModel.description.ilike(pattern))


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    # produkty
    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_active_product(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(
                ProductModel.id == product_id,
                ProductModel.status == "active",
            )
        ).unique().scalar_one_or_none()

    def slug_exists(self, slug: str) -> bool:
        return self.db.execute(
            select(ProductModel.id).where(ProductModel.slug == slug)
        ).first() is not None

    def list_products(
        self,
        offset: int,
        limit: int,
        category_id: Optional[int] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        search: Optional[str] = None,
        featured: bool = False,
        in_stock: bool = False,
        sort_by: str = "newest",
    ) -> Tuple[List[ProductModel], int]:
        stmt = select(ProductModel).where(ProductModel.status == "active")

        if category_id is not None:
            stmt = stmt.where(ProductModel.category_id == category_id)
        if min_price is not None:
            stmt = stmt.where(ProductModel.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(ProductModel.price <= max_price)
        if search:
            stmt = stmt.where(_search_clause(search))
        if featured:
            stmt = stmt.where(ProductModel.featured.is_(True))
        if in_stock:
            stmt = stmt.where(ProductModel.stock > 0)

        stmt = stmt.order_by(*_SORTS.get(sort_by, _SORTS["newest"]))
        return fetch_page(self.db, stmt, offset, limit)

    def featured_products(self, limit: int) -> List[ProductModel]:
        stmt = (
            select(ProductModel)
            .where(ProductModel.status == "active", ProductModel.featured.is_(True))
            .order_by(ProductModel.id)
            .limit(limit)
        )
        return list(self.db.execute(stmt).unique().scalars().all())

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    # stan magazynowy - bez commita, transakcja należy do serwisu
    def decrement_stock(self, product_id: int, quantity: int) -> int:
        """UPDATE ... WHERE stock >= quantity, zwraca rowcount."""
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def increment_stock(self, product_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # recenzje
    def get_user_review(self, user_id: int, product_id: int) -> ReviewModel | None:
        return self.db.execute(
            select(ReviewModel).where(
                ReviewModel.user_id == user_id,
                ReviewModel.product_id == product_id,
            )
        ).unique().scalar_one_or_none()

    def list_reviews(self, product_id: int, offset: int, limit: int) -> Tuple[List[ReviewModel], int]:
        stmt = (
            select(ReviewModel)
            .where(ReviewModel.product_id == product_id)
            .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
        )
        return fetch_page(self.db, stmt, offset, limit)

    def add_review(self, review: ReviewModel) -> ReviewModel:
        self.db.add(review)
        self.db.flush()
        return review

    def review_stats(self, product_id: int) -> Tuple[float, int]:
        avg, count = self.db.execute(
            select(func.avg(ReviewModel.rating), func.count(ReviewModel.id)).where(
                ReviewModel.product_id == product_id
            )
        ).one()
        return float(avg or 0), count

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
