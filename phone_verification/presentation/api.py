from fastapi import APIRouter

from phone_verification.presentation.routers.v1.phone_verifications import (
    router as phone_verifications_router,
)
from phone_verification.presentation.routes.health import router as health_router

api = APIRouter()

# Add all v1 routers here
routers = (phone_verifications_router,)
for router in routers:
    api.include_router(router, prefix="/v1")

api.include_router(health_router)
