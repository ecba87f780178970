"""
Main API Router for Para Sports ID Card System v1
Includes all endpoint routers
"""

from fastapi import APIRouter

from app.api.v1.endpoints import idcards

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(idcards.router, prefix="/idcards", tags=["ID Cards"])
