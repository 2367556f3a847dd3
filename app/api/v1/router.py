# app/api/v1/router.py
from fastapi import APIRouter
from app.api.v1.auth import router as auth_router
from app.modules.products import router as products_router
from app.modules.customers import router as customers_router
from app.modules.sales import router as sales_router
from app.modules.dashboard import router as dashboard_router
from app.modules.reports import router as reports_router


# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(
    products_router,
    prefix="/products",
    tags=["Products"]
)

api_router.include_router(
    customers_router,
    prefix="/customers",
    tags=["Customers"]
)

api_router.include_router(
    sales_router,
    prefix="/sales",
    tags=["Sales"]
)

api_router.include_router(
    dashboard_router,
    prefix="/dashboard",
    tags=["Dashboard"]
)

api_router.include_router(
    reports_router,
    prefix="/reports",
    tags=["Reports"]
)


@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": "Inventory API v1",
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "authentication": "/api/v1/auth",
            "products": "/api/v1/products",
            "customers": "/api/v1/customers",
            "sales": "/api/v1/sales",
            "dashboard": "/api/v1/dashboard",
            "reports": "/api/v1/reports"
        }
    }
