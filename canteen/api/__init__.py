# canteen/api/__init__.py
from fastapi import FastAPI

from canteen.api.routers import canteens, carts, health, orders, users


def create_app() -> FastAPI:
    app = FastAPI(
        title="Canteen Ordering Service",
        version="1.0.0",
    )

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(canteens.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app
