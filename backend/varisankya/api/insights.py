"""API endpoints for AI subscription insights."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from varisankya.dependencies import get_db
from varisankya.exceptions import InsightGenerationFailed, InsightUnavailable
from varisankya.schemas.insight import InsightRequest, InsightResponse
from varisankya.services import insight_service

router = APIRouter(prefix="/insights", tags=["insights"])


@router.post("", response_model=InsightResponse)
async def get_insight(
    request: InsightRequest,
    db: Session = Depends(get_db)
):
    """Research report for a subscription name (cached for an hour)."""
    location = request.location.model_dump(exclude_none=True) if request.location else None
    try:
        insight, cached = await insight_service.get_insight(db, request.subscription_name, location)
    except InsightGenerationFailed as e:
        raise HTTPException(status_code=502, detail=str(e))
    except InsightUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    return InsightResponse(insight=insight, cached=cached)


@router.delete("")
def clear_insight(
    subscription_name: str = Query(..., min_length=1),
    db: Session = Depends(get_db)
):
    """Drop the cached insight so the next request regenerates it."""
    cleared = insight_service.clear_insight(db, subscription_name)
    return {"cleared": cleared}
