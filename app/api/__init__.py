# app/api/__init__.py
from fastapi import FastAPI
from app.api.errors import register_exception_handlers
from app.api.routers import carts, orders, health


def create_app(**kwargs) -> FastAPI:
    app = FastAPI(
        title="Order Service",
        version="1.0.0",
        **kwargs,
    )

    register_exception_handlers(app)

    # carts first, /orders/cart must not be taken by /orders/{order_id}
    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app
