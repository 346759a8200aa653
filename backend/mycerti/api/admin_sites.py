"""Admin site management endpoints.

Admin routes act on any site; ownership is not checked here.
"""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from mycerti.auth.tokens import require_admin
from mycerti.database import get_db
from mycerti.models import Asset, Page, PublishJob, Site, SiteUser, User
from mycerti.schemas.site import AdminSiteUpdate, SiteSuspendRequest, SiteTransferRequest
from mycerti.services import sites as site_service
from mycerti.utils.db import get_by_id, paginate, resolve_sort
from mycerti.utils.exceptions import AppException, handle_database_error, validation_error
from mycerti.utils.logger import logger
from mycerti.utils.serialization import serialize_model_to_dict

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

SITE_SORT_FIELDS = {
    "created_at": Site.created_at,
    "name": Site.name,
    "subdomain": Site.subdomain,
    "plan": Site.plan,
    "owner_email": User.email,
}

RECENT_PAGES_LIMIT = 10
RECENT_PUBLISHES_LIMIT = 5


def _owner_fields(email: Optional[str], name: Optional[str], status: Optional[str]) -> dict[str, Any]:
    return {"owner_email": email, "owner_name": name, "owner_status": status}


@router.get("/sites")
def list_sites(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Matches site name, subdomain, owner email or owner name"),
    plan: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    sortBy: Optional[str] = Query("created_at"),
    sortOrder: Optional[str] = Query("DESC"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    Page through all sites with owner info and usage counters.

    Args:
        page: 1-based page number
        limit: Page size
        search: Substring to look for
        plan: Only sites on this plan
        status_filter: Only sites with this status
        sortBy: One of created_at, name, subdomain, plan, owner_email
        sortOrder: ASC or DESC
        db: Database session

    Returns:
        Sites and pagination info
    """
    try:
        query = db.query(Site).outerjoin(User, Site.owner_user_id == User.id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Site.name.ilike(pattern),
                Site.subdomain.ilike(pattern),
                User.email.ilike(pattern),
                User.name.ilike(pattern),
            ))
        if plan:
            query = query.filter(Site.plan == plan)
        if status_filter:
            query = query.filter(Site.status == status_filter)

        column, descending = resolve_sort(sortBy, sortOrder, SITE_SORT_FIELDS)
        order = (column.desc(), Site.id.desc()) if descending else (column.asc(), Site.id.asc())
        query = query.add_columns(
            User.email,
            User.name,
            User.status,
            site_service.published_pages_column().label("published_pages"),
            site_service.total_pages_column().label("total_pages"),
            site_service.total_assets_column().label("total_assets"),
            site_service.total_size_bytes_column().label("total_size_bytes"),
            site_service.members_count_column().label("members_count"),
        ).order_by(*order)

        rows, pagination = paginate(query, page, limit)

        sites = []
        for site, owner_email, owner_name, owner_status, *counters in rows:
            item = serialize_model_to_dict(site)
            item.update(_owner_fields(owner_email, owner_name, owner_status))
            published_pages, total_pages, total_assets, total_size_bytes, members_count = counters
            item.update(
                published_pages=published_pages,
                total_pages=total_pages,
                total_assets=total_assets,
                total_size_bytes=int(total_size_bytes or 0),
                members_count=members_count,
            )
            sites.append(item)

        return {"sites": sites, "pagination": pagination}
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to list sites: {e}", exc_info=True)
        raise handle_database_error(e, "list_sites")


@router.get("/sites/{site_id}")
def get_site(site_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Site detail with members, recent pages and recent publish jobs."""
    try:
        site = get_by_id(db, Site, site_id, "Site not found")
        owner = db.get(User, site.owner_user_id)

        members = (
            db.query(SiteUser, User.email, User.name, User.status)
            .outerjoin(User, SiteUser.user_id == User.id)
            .filter(SiteUser.site_id == site.id)
            .order_by(SiteUser.added_at.desc())
            .all()
        )
        recent_pages = (
            db.query(Page, User.name)
            .outerjoin(User, Page.updated_by == User.id)
            .filter(Page.site_id == site.id)
            .order_by(Page.updated_at.desc(), Page.id.desc())
            .limit(RECENT_PAGES_LIMIT)
            .all()
        )
        recent_publishes = (
            db.query(PublishJob, User.name)
            .outerjoin(User, PublishJob.created_by == User.id)
            .filter(PublishJob.site_id == site.id)
            .order_by(PublishJob.created_at.desc(), PublishJob.id.desc())
            .limit(RECENT_PUBLISHES_LIMIT)
            .all()
        )

        detail = serialize_model_to_dict(site)
        detail.update(_owner_fields(
            owner.email if owner else None,
            owner.name if owner else None,
            owner.status if owner else None,
        ))
        detail["members"] = [
            {**serialize_model_to_dict(member), "email": email, "name": name, "status": status}
            for member, email, name, status in members
        ]
        detail["recent_pages"] = [
            {**serialize_model_to_dict(page), "updated_by_name": name}
            for page, name in recent_pages
        ]
        detail["recent_publishes"] = [
            {**serialize_model_to_dict(job), "created_by_name": name}
            for job, name in recent_publishes
        ]
        detail["stats"] = site_service.get_site_stats(db, site.id)
        return {"site": detail}
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to get site {site_id}: {e}", exc_info=True)
        raise handle_database_error(e, "get_site")


@router.put("/sites/{site_id}")
def update_site(
    site_id: int,
    request: AdminSiteUpdate,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    Change a site's name, plan, status or quotas.

    A plan change resets quotas to the plan defaults unless quota values are
    given in the same request.
    """
    try:
        site = get_by_id(db, Site, site_id, "Site not found")

        changed = site_service.apply_site_updates(
            site,
            name=request.name,
            plan=request.plan,
            status=request.status,
            quota_pages=request.quota_pages,
            quota_assets_mb=request.quota_assets_mb,
        )
        if not changed:
            raise validation_error("No fields to update")

        db.commit()
        db.refresh(site)

        logger.info(f"Admin updated site {site_id}: {', '.join(changed)}")
        return {
            "message": "Site updated successfully",
            "site": serialize_model_to_dict(site),
        }
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update site {site_id}: {e}", exc_info=True)
        raise handle_database_error(e, "update_site")


@router.post("/sites/{site_id}/transfer")
def transfer_site(
    site_id: int,
    request: SiteTransferRequest,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Move a site to another active user."""
    try:
        site = get_by_id(db, Site, site_id, "Site not found")
        previous_owner_id = site_service.transfer_ownership(db, site, request.newOwnerId)
        return {
            "message": "Site ownership transferred successfully",
            "from": previous_owner_id,
            "to": request.newOwnerId,
            "reason": request.transferReason,
        }
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to transfer site {site_id}: {e}", exc_info=True)
        raise handle_database_error(e, "transfer_site")


@router.delete("/sites/{site_id}")
def delete_site(site_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Delete any site; the response reports what was removed with it."""
    try:
        site = get_by_id(db, Site, site_id, "Site not found")

        deleted_stats = {
            "pages_count": db.query(func.count(Page.id)).filter(Page.site_id == site.id).scalar() or 0,
            "assets_count": db.query(func.count(Asset.id)).filter(Asset.site_id == site.id).scalar() or 0,
            "members_count": db.query(func.count(SiteUser.user_id)).filter(SiteUser.site_id == site.id).scalar() or 0,
        }

        # Cascade delete will handle members, pages, assets and publish jobs
        db.delete(site)
        db.commit()

        logger.info(f"Admin deleted site {site_id}: {deleted_stats}")
        return {
            "message": "Site deleted successfully",
            "deleted_stats": deleted_stats,
        }
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete site {site_id}: {e}", exc_info=True)
        raise handle_database_error(e, "delete_site")


@router.post("/sites/{site_id}/suspend")
def suspend_site(
    site_id: int,
    request: Optional[SiteSuspendRequest] = Body(None),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Suspend a site and record why."""
    try:
        site = get_by_id(db, Site, site_id, "Site not found")
        reason = request.reason if request else None

        site_service.suspend_site(db, site, reason)
        return {
            "message": "Site suspended successfully",
            "status": site.status,
            "reason": reason or "No reason provided",
        }
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to suspend site {site_id}: {e}", exc_info=True)
        raise handle_database_error(e, "suspend_site")
