from fastapi import APIRouter
from supermarket.routes.api.invoices import api_router as invoices_router

api_router = APIRouter(tags=["api"])
api_router.include_router(invoices_router)

__all__ = ["api_router"]
