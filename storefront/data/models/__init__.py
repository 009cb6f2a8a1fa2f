#import wszystkich modeli żeby SQLAlchemy je zarejestrował w base metadata

from storefront.data.models.user import UserModel
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.review import ReviewModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.coupon import CouponModel
from storefront.data.models.order import OrderModel, OrderItemModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "ReviewModel",
    "CartItemModel",
    "CouponModel",
    "OrderModel",
    "OrderItemModel",
]
