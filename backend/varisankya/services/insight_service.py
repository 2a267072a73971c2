"""Service for AI research insights about a subscription, cached by name."""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from varisankya.ai.client import get_ai_client
from varisankya.ai.prompts import SUBSCRIPTION_INSIGHT_SYSTEM, SUBSCRIPTION_INSIGHT_USER
from varisankya.config import settings
from varisankya.exceptions import InsightGenerationFailed, InsightUnavailable
from varisankya.models.insight_cache import InsightCache

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "User Location: United States (Default)"


def describe_location(location: Optional[Dict[str, Any]]) -> str:
    """Render the optional client location the way the prompt expects."""
    if not location:
        return DEFAULT_LOCATION
    if location.get("latitude") is not None and location.get("longitude") is not None:
        return f"User Location: {location['latitude']}, {location['longitude']}"
    if location.get("country"):
        return f"User Location: {location['country']}"
    return DEFAULT_LOCATION


def _cache_row(db: Session, subscription_name: str) -> Optional[InsightCache]:
    return db.query(InsightCache).filter(InsightCache.subscription_name == subscription_name).first()


def get_cached_insight(db: Session, subscription_name: str, now: Optional[datetime] = None) -> Optional[InsightCache]:
    """Cache row for the name if it is still fresh."""
    now = now or datetime.utcnow()
    cutoff = now - timedelta(seconds=settings.insight_cache_ttl_seconds)
    return db.query(InsightCache).filter(
        InsightCache.subscription_name == subscription_name,
        InsightCache.created_at > cutoff,
    ).first()


def store_insight(
    db: Session,
    subscription_name: str,
    data: Dict[str, Any],
    location: Optional[Dict[str, Any]] = None,
) -> InsightCache:
    """
    Insert or overwrite the cache row for the name.

    A concurrent insert of the same name loses the unique-key race; the
    loser rolls back and overwrites the winner's row instead.
    """
    entry = _cache_row(db, subscription_name)
    if entry is None:
        entry = InsightCache(
            id=str(uuid.uuid4()),
            subscription_name=subscription_name,
            data=data,
            location=location,
            created_at=datetime.utcnow(),
        )
        db.add(entry)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.debug("Insight cache row for %r already inserted, updating it", subscription_name)
            entry = _cache_row(db, subscription_name)
        else:
            db.refresh(entry)
            return entry

    entry.data = data
    entry.location = location
    entry.created_at = datetime.utcnow()
    db.commit()
    db.refresh(entry)
    return entry


async def get_insight(
    db: Session,
    subscription_name: str,
    location: Optional[Dict[str, Any]] = None,
) -> Tuple[Dict[str, Any], bool]:
    """
    Research insight for a subscription name.

    Returns (insight, cached). Served from cache when a fresh entry exists,
    otherwise generated by the LLM and stored.
    """
    cached = get_cached_insight(db, subscription_name)
    if cached:
        logger.debug("Insight cache hit for %r", subscription_name)
        return cached.data, True

    if not settings.ai_insights_enabled:
        raise InsightUnavailable("AI insights are disabled")

    client = get_ai_client()
    if not client.is_configured():
        raise InsightUnavailable(f"No API key configured for AI provider {client.provider!r}")

    user_prompt = SUBSCRIPTION_INSIGHT_USER.format(
        subscription_name=subscription_name,
        location=describe_location(location),
    )

    try:
        result = await client.complete_json(
            system_prompt=SUBSCRIPTION_INSIGHT_SYSTEM,
            user_prompt=user_prompt,
            temperature=0.3,
            max_tokens=800,
        )
    except Exception as e:
        logger.error("Insight generation failed for %r: %s", subscription_name, e)
        raise InsightGenerationFailed("Failed to generate insights") from e

    store_insight(db, subscription_name, result, location)
    return result, False


def clear_insight(db: Session, subscription_name: str) -> bool:
    """Drop the cached insight for a name. Returns whether one existed."""
    deleted = db.query(InsightCache).filter(
        InsightCache.subscription_name == subscription_name
    ).delete(synchronize_session=False)
    db.commit()
    return deleted > 0
