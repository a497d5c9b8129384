from fastapi import APIRouter
from studybot.api import health, interactions

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health.router)
api_router.include_router(interactions.router)
