"""Aggregate counts and daily time series for the admin console."""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from mycerti.constants import (
    RECENT_PUBLISH_DAYS,
    PageStatus,
    SitePlan,
    SiteStatus,
    UserStatus,
)
from mycerti.models import Page, PublishJob, Site, User
from mycerti.utils.serialization import serialize_row


def _cutoff(days: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def dashboard_stats(db: Session) -> Dict[str, int]:
    """Platform-wide counters shown on the admin dashboard."""
    users_by_status = dict(
        db.query(User.status, func.count(User.id)).group_by(User.status).all()
    )
    sites_by_plan = dict(
        db.query(Site.plan, func.count(Site.id)).group_by(Site.plan).all()
    )

    return {
        "active_users": users_by_status.get(UserStatus.ACTIVE, 0),
        "suspended_users": users_by_status.get(UserStatus.SUSPENDED, 0),
        "total_sites": sum(sites_by_plan.values()),
        "free_sites": sites_by_plan.get(SitePlan.FREE, 0),
        "pro_sites": sites_by_plan.get(SitePlan.PRO, 0),
        "enterprise_sites": sites_by_plan.get(SitePlan.ENTERPRISE, 0),
        "suspended_sites": db.query(func.count(Site.id)).filter(
            Site.status == SiteStatus.SUSPENDED
        ).scalar() or 0,
        "published_pages": db.query(func.count(Page.id)).filter(
            Page.status == PageStatus.PUBLISHED
        ).scalar() or 0,
        "recent_publishes": db.query(func.count(PublishJob.id)).filter(
            PublishJob.created_at >= _cutoff(RECENT_PUBLISH_DAYS)
        ).scalar() or 0,
    }


def signup_series(db: Session, days: int) -> List[Dict[str, Any]]:
    """Signups per day over the last ``days`` days, newest first."""
    day = func.date(User.created_at).label("date")
    rows = (
        db.query(day, func.count(User.id).label("signups"))
        .filter(User.created_at >= _cutoff(days))
        .group_by(day)
        .order_by(day.desc())
        .all()
    )
    return [serialize_row(row) for row in rows]


def site_creation_series(db: Session, days: int) -> List[Dict[str, Any]]:
    """Sites created per day and plan over the last ``days`` days."""
    day = func.date(Site.created_at).label("date")
    rows = (
        db.query(day, Site.plan.label("plan"), func.count(Site.id).label("created"))
        .filter(Site.created_at >= _cutoff(days))
        .group_by(day, Site.plan)
        .order_by(day.desc(), Site.plan)
        .all()
    )
    return [serialize_row(row) for row in rows]


def publishing_series(db: Session, days: int) -> List[Dict[str, Any]]:
    """Publish jobs per day, scope and status over the last ``days`` days."""
    day = func.date(PublishJob.created_at).label("date")
    rows = (
        db.query(
            day,
            PublishJob.scope.label("scope"),
            PublishJob.status.label("status"),
            func.count(PublishJob.id).label("count"),
        )
        .filter(PublishJob.created_at >= _cutoff(days))
        .group_by(day, PublishJob.scope, PublishJob.status)
        .order_by(day.desc(), PublishJob.scope, PublishJob.status)
        .all()
    )
    return [serialize_row(row) for row in rows]
