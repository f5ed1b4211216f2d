# storefront/api/__init__.py
from fastapi import FastAPI

from storefront.api.routers import (
    carts,
    catalog,
    checkout,
    health,
    newsletter,
    orders,
    payment,
    users,
    wishlist,
)


def include_routers(app: FastAPI) -> FastAPI:
    app.include_router(health.router)
    app.include_router(users.auth_router)
    app.include_router(users.router)
    app.include_router(catalog.router)
    app.include_router(carts.router)
    app.include_router(checkout.router)
    app.include_router(payment.router)
    app.include_router(orders.router)
    app.include_router(orders.admin_router)
    app.include_router(wishlist.router)
    app.include_router(newsletter.router)
    return app
