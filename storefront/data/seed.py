# storefront/data/seed.py
from datetime import datetime, timezone
from decimal import Decimal

from storefront.data.database import SessionLocal, init_db
from storefront.data.models import (
    CartItemModel,
    CategoryModel,
    CouponModel,
    ProductModel,
    UserModel,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = [
    ("Electronics", "electronics"),
    ("Clothing", "clothing"),
    ("Home & Garden", "home-garden"),
    ("Sports", "sports"),
    ("Books", "books"),
]

# (nazwa, slug kategorii, cena, stan, wyróżniony)
PRODUCTS = [
    ("Wireless Bluetooth Headphones", "electronics", "79.99", 50, True),
    ("Smart Watch Pro", "electronics", "249.99", 25, True),
    ("Portable Bluetooth Speaker", "electronics", "59.99", 40, False),
    ("Mechanical Gaming Keyboard", "electronics", "129.99", 30, False),
    ("Classic Cotton T-Shirt", "clothing", "19.99", 100, False),
    ("Slim Fit Jeans", "clothing", "49.99", 60, True),
    ("Running Sneakers", "clothing", "89.99", 35, False),
    ("LED Desk Lamp", "home-garden", "34.99", 45, False),
    ("Throw Blanket", "home-garden", "39.99", 0, False),
    ("Yoga Mat Pro", "sports", "29.99", 80, True),
    ("Dumbbell Set", "sports", "119.99", 15, False),
    ("The Art of Programming", "books", "44.99", 70, False),
]

COUPONS = [
    dict(code="SAVE10", type="percentage", discount=Decimal("10"), min_order_amount=Decimal("50"), max_usages=100),
    dict(code="SAVE20", type="percentage", discount=Decimal("20"), min_order_amount=Decimal("100"), max_usages=50),
    dict(code="FLAT5", type="fixed", discount=Decimal("5"), min_order_amount=None, max_usages=None),
    dict(code="SUMMER", type="percentage", discount=Decimal("15"), min_order_amount=Decimal("75"), max_usages=200),
    dict(
        code="EXPIRED10",
        type="percentage",
        discount=Decimal("10"),
        min_order_amount=None,
        max_usages=None,
        expires_at=datetime(2020, 1, 1, tzinfo=timezone.utc),
    ),
]


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(UserModel).first():
            logger.info("Database already seeded, skipping")
            return

        admin = UserModel(email="admin@example.com", first_name="Admin", last_name="User", role="admin")
        shopper = UserModel(email="user@example.com", first_name="Test", last_name="User")
        db.add_all([admin, shopper])

        categories = {}
        for name, slug in CATEGORIES:
            categories[slug] = CategoryModel(name=name, slug=slug, description=f"{name} products")
        db.add_all(categories.values())
        db.flush()

        products = []
        for name, category_slug, price, stock, featured in PRODUCTS:
            slug = name.lower().replace(" ", "-")
            products.append(
                ProductModel(
                    name=name,
                    slug=slug,
                    description=f"{name} - quality product from our {category_slug} range.",
                    price=Decimal(price),
                    category_id=categories[category_slug].id,
                    stock=stock,
                    images=[f"https://images.example.com/{slug}.jpg"],
                    featured=featured,
                )
            )
        db.add_all(products)
        db.flush()

        db.add_all(
            [
                CartItemModel(user_id=shopper.id, product_id=products[2].id, quantity=2),
                CartItemModel(user_id=shopper.id, product_id=products[5].id, quantity=1),
            ]
        )
        db.add_all([CouponModel(usage_count=0, is_active=True, **data) for data in COUPONS])

        db.commit()
        logger.info(
            f"Seeded {len(CATEGORIES)} categories, {len(PRODUCTS)} products, {len(COUPONS)} coupons"
        )
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
    seed()
