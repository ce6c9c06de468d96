"""
Central API Router
Combines all API endpoints into a single router for main.py
"""
from fastapi import APIRouter

from .endpoints import logs, map_chart

api_router = APIRouter()

api_router.include_router(map_chart.router, prefix="/api/map", tags=["map"])
api_router.include_router(logs.router, prefix="/api/logs", tags=["logs"])
