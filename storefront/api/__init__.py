# storefront/api/__init__.py
from fastapi import APIRouter

from storefront.api.routers import cart, categories, coupons, health, orders, payments, products, users

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health.router)
api_router.include_router(users.router)
api_router.include_router(categories.router)
api_router.include_router(products.router)
api_router.include_router(cart.router)
api_router.include_router(orders.router)
api_router.include_router(payments.router)
api_router.include_router(coupons.router)
