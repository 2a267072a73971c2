"""Pydantic schemas for AI subscription insights."""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any


class Location(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    country: Optional[str] = None


class InsightRequest(BaseModel):
    subscription_name: str = Field(..., min_length=1, max_length=100)
    location: Optional[Location] = None


class InsightResponse(BaseModel):
    insight: Dict[str, Any]
    cached: bool
