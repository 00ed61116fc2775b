# storefront/api/__init__.py
from fastapi import FastAPI

from storefront.api.errors import register_error_handlers
from storefront.api.routers import carts, catalog, checkout, health, orders, profiles


def create_app(lifespan=None) -> FastAPI:
    app = FastAPI(
        title="Storefront Order Engine",
        version="1.0.0",
        lifespan=lifespan,
    )

    register_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(profiles.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(checkout.router)
    app.include_router(catalog.router)

    return app
