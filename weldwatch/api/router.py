from fastapi import APIRouter

from weldwatch.api.routes import monitoring, voltage

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(monitoring.router, tags=["monitoring"])

store_router = voltage.router
