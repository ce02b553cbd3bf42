from fastapi import APIRouter

from src.provisioner.api.v1 import onboarding, provisioning

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(provisioning.router)
api_router.include_router(onboarding.router)
