from fastapi import APIRouter

from land_journey.api.routes import health, land_journey

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(land_journey.router, prefix="/land-journey", tags=["land-journey"])
