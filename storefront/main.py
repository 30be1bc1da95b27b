from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.config import settings
from storefront.database import create_db_and_tables
from storefront.dependencies.admin import AdminPolicy
from storefront.routes import admin_orders, checkout, health, user_orders


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
    yield


app = FastAPI(title="Storefront Checkout API", lifespan=lifespan)

# resolved once; routes read it from app.state
app.state.admin_policy = AdminPolicy.from_settings(settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])
app.include_router(user_orders.router, prefix="/account/orders", tags=["Account Orders"])
app.include_router(admin_orders.router, prefix="/admin/orders", tags=["Admin Orders"])
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get("/")
def root():
    return {
        "checkout_endpoints": [
            "/checkout", "/checkout/orders/{public_id}"
        ],
        "account_endpoints": [
            "/account/orders"
        ],
        "admin_order_endpoints": [
            "/admin/orders", "/admin/orders/{public_id}",
            "/admin/orders/{public_id}/status"
        ],
    }
