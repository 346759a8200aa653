"""Admin dashboard and statistics endpoints."""
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mycerti.auth.tokens import require_admin
from mycerti.database import get_db
from mycerti.services import stats as stats_service
from mycerti.utils.exceptions import handle_database_error
from mycerti.utils.logger import logger

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

DEFAULT_STATS_DAYS = 30


@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db)) -> dict[str, Any]:
    """Platform-wide user, site, page and publishing counters."""
    try:
        return {"stats": stats_service.dashboard_stats(db)}
    except Exception as e:
        logger.error(f"Dashboard error: {e}", exc_info=True)
        raise handle_database_error(e, "dashboard")


@router.get("/stats/users")
def user_stats(
    days: int = Query(DEFAULT_STATS_DAYS, ge=1, le=3650, description="Window in days"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Daily signups."""
    try:
        return {"stats": stats_service.signup_series(db, days), "period": f"{days} days"}
    except Exception as e:
        logger.error(f"User stats error: {e}", exc_info=True)
        raise handle_database_error(e, "user_stats")


@router.get("/stats/sites")
def site_stats(
    days: int = Query(DEFAULT_STATS_DAYS, ge=1, le=3650, description="Window in days"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Daily site creations per plan."""
    try:
        return {"stats": stats_service.site_creation_series(db, days), "period": f"{days} days"}
    except Exception as e:
        logger.error(f"Site stats error: {e}", exc_info=True)
        raise handle_database_error(e, "site_stats")


@router.get("/stats/publishing")
def publishing_stats(
    days: int = Query(DEFAULT_STATS_DAYS, ge=1, le=3650, description="Window in days"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Daily publish jobs per scope and status."""
    try:
        return {"stats": stats_service.publishing_series(db, days), "period": f"{days} days"}
    except Exception as e:
        logger.error(f"Publishing stats error: {e}", exc_info=True)
        raise handle_database_error(e, "publishing_stats")
