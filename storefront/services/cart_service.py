from decimal import Decimal
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain import pricing
from storefront.domain.errors import BusinessRuleError, NotFoundError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def cart_lines(items: List[CartItemModel]) -> List[Tuple[Decimal, int]]:
    """(price, quantity) dla pozycji, których produkt nadal istnieje."""
    return [(i.product.price, i.quantity) for i in items if i.product is not None]


class CartService:
    """
    Use case'y dla koszyka użytkownika.
    commands (add, update, remove, clear) modyfikują stan,
    query (get, subtotal) tylko odczyt - subtotal zawsze liczony z aktualnych pozycji.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    # query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        items = self.repo.get_cart_items(user_id)

        return {
            "items": items,
            "subtotal": pricing.cart_subtotal(cart_lines(items)),
            "item_count": sum(i.quantity for i in items),
        }

    def subtotal(self, user_id: int) -> Decimal:
        return pricing.cart_subtotal(cart_lines(self.repo.get_cart_items(user_id)))

    # commands
    def add_item(self, user_id: int, product_id: int, quantity: int) -> Tuple[CartItemModel, bool]:
        """Zwraca (pozycja, czy_nowa)."""
        if quantity <= 0:
            raise BusinessRuleError("Quantity must be greater than 0", "VALIDATION_ERROR")

        product = self.products.get_active_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        if product.stock < quantity:
            raise BusinessRuleError("Insufficient stock", "INSUFFICIENT_STOCK")

        existing = self.repo.get_cart_item_by_product(user_id, product_id)

        if existing:
            new_quantity = existing.quantity + quantity
            if product.stock < new_quantity:
                raise BusinessRuleError("Insufficient stock", "INSUFFICIENT_STOCK")

            logger.info(
                f"Product {product_id} already in cart of user {user_id}, "
                f"quantity {existing.quantity} -> {new_quantity}"
            )
            existing.quantity = new_quantity
            return self.repo.add_cart_item(existing), False

        logger.info(f"Adding product {product_id} x{quantity} to cart of user {user_id}")
        item = self.repo.add_cart_item(
            CartItemModel(
                user_id=user_id,
                product_id=product_id,
                quantity=quantity,
            )
        )
        return item, True

    def update_item(self, user_id: int, item_id: int, quantity: int) -> CartItemModel:
        item = self.repo.get_cart_item(item_id, user_id)
        if not item:
            raise NotFoundError("Cart item not found")

        product = self.products.get_product(item.product_id)
        if not product or product.stock < quantity:
            raise BusinessRuleError("Insufficient stock", "INSUFFICIENT_STOCK")

        item.quantity = quantity
        return self.repo.add_cart_item(item)

    def remove_item(self, user_id: int, item_id: int) -> None:
        item = self.repo.get_cart_item(item_id, user_id)
        if not item:
            raise NotFoundError("Cart item not found")

        self.repo.delete_cart_item(item)
        logger.info(f"Removed cart item {item_id} of user {user_id}")

    def clear_cart(self, user_id: int) -> None:
        self.repo.clear_cart(user_id)
        logger.info(f"Cart of user {user_id} cleared")
