"""
Main API router.
"""

from fastapi import APIRouter
from varisankya.api import subscriptions, notifications, analytics, insights

api_router = APIRouter()

api_router.include_router(subscriptions.router)
api_router.include_router(notifications.router)
api_router.include_router(analytics.router)
api_router.include_router(insights.router)
