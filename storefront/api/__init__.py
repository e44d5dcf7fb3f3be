# storefront/api/__init__.py
from fastapi import APIRouter

from storefront.api.routers import (
    addresses,
    admin,
    auth,
    carts,
    currencies,
    orders,
    payments,
    products,
    reviews,
    shipping,
    users,
    wishlist,
)

api_router = APIRouter(prefix="/api")

for module in (auth, users, admin, products, carts, addresses, orders, payments, reviews, wishlist, shipping, currencies):
    api_router.include_router(module.router)
