from fastapi import APIRouter
from bono.routers import bonos, reports

# Centralized API router hub; main.py only imports this single hub.
# The HTML dashboard router is mounted separately, outside the API prefix.
api_router = APIRouter()

api_router.include_router(bonos.router, tags=["Bonos"])
api_router.include_router(reports.router, tags=["Reports"])
