# app/api/__init__.py
from fastapi import FastAPI

from app.api.routers import admin, carts, checkout, health, payments


def create_app() -> FastAPI:
    app = FastAPI(
        title="Shop Service",
        version="1.0.0",
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(carts.router, prefix="/v1")
    app.include_router(checkout.router, prefix="/v1")
    app.include_router(payments.router, prefix="/v1")
    app.include_router(admin.router, prefix="/v1")

    return app
