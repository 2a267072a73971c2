"""
Cached AI research insights, keyed by subscription name.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from varisankya.database import Base


class InsightCache(Base):
    """Last generated insight for a subscription name."""

    __tablename__ = "insight_cache"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    subscription_name = Column(String(100), unique=True, nullable=False, index=True)
    data = Column(JSON, nullable=False)
    location = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
