"""Admin user management endpoints."""
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from mycerti.auth.tokens import require_admin
from mycerti.constants import SitePlan, UserStatus
from mycerti.database import get_db
from mycerti.models import Site, User
from mycerti.schemas.user import AdminUserCreate, AdminUserUpdate, PasswordResetRequest
from mycerti.services.credentials import create_account, reset_password
from mycerti.services.sites import count_owned_sites, published_pages_column
from mycerti.utils.db import get_by_id, paginate, resolve_sort
from mycerti.utils.exceptions import AppException, handle_database_error, validation_error
from mycerti.utils.logger import logger
from mycerti.utils.serialization import serialize_datetime, serialize_model_to_dict

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

USER_SORT_FIELDS = {
    "created_at": User.created_at,
    "email": User.email,
    "name": User.name,
    "status": User.status,
}


def _owned_sites_count(plan: Optional[str] = None):
    query = select(func.count(Site.id)).where(Site.owner_user_id == User.id)
    if plan:
        query = query.where(Site.plan == plan)
    return query.correlate(User).scalar_subquery()


@router.get("/users")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Matches email or name"),
    status_filter: Optional[str] = Query(None, alias="status"),
    sortBy: Optional[str] = Query("created_at"),
    sortOrder: Optional[str] = Query("DESC"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    Page through users with their site counts.

    Args:
        page: 1-based page number
        limit: Page size
        search: Substring of email or name
        status_filter: Only users with this status
        sortBy: One of created_at, email, name, status; anything else sorts by created_at
        sortOrder: ASC or DESC
        db: Database session

    Returns:
        Users and pagination info
    """
    try:
        query = db.query(User)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(User.email.ilike(pattern), User.name.ilike(pattern)))
        if status_filter:
            query = query.filter(User.status == status_filter)

        column, descending = resolve_sort(sortBy, sortOrder, USER_SORT_FIELDS)
        order = (column.desc(), User.id.desc()) if descending else (column.asc(), User.id.asc())
        query = query.add_columns(
            _owned_sites_count().label("sites_count"),
            _owned_sites_count(SitePlan.FREE).label("free_sites"),
            _owned_sites_count(SitePlan.PRO).label("pro_sites"),
            _owned_sites_count(SitePlan.ENTERPRISE).label("enterprise_sites"),
        ).order_by(*order)

        rows, pagination = paginate(query, page, limit)

        users = []
        for user, sites_count, free_sites, pro_sites, enterprise_sites in rows:
            item = serialize_model_to_dict(user)
            item.update(
                sites_count=sites_count,
                free_sites=free_sites,
                pro_sites=pro_sites,
                enterprise_sites=enterprise_sites,
            )
            users.append(item)

        return {"users": users, "pagination": pagination}
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to list users: {e}", exc_info=True)
        raise handle_database_error(e, "list_users")


@router.get("/users/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    """User detail with the sites they own."""
    try:
        user = get_by_id(db, User, user_id, "User not found")

        rows = (
            db.query(Site, published_pages_column().label("published_pages"))
            .filter(Site.owner_user_id == user.id)
            .order_by(Site.created_at.desc(), Site.id.desc())
            .all()
        )
        sites = [
            {
                "id": site.id,
                "name": site.name,
                "subdomain": site.subdomain,
                "plan": site.plan,
                "status": site.status,
                "created_at": serialize_datetime(site.created_at),
                "published_pages": published_pages,
            }
            for site, published_pages in rows
        ]

        detail = serialize_model_to_dict(user)
        detail.update(sites_count=len(sites), sites=sites)
        return {"user": detail}
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to get user {user_id}: {e}", exc_info=True)
        raise handle_database_error(e, "get_user")


@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(request: AdminUserCreate, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Create a user on someone's behalf, optionally already suspended."""
    try:
        user = create_account(db, request.email, request.password, request.name, request.status)
        return {
            "message": "User created successfully",
            "user": {
                "id": user.id,
                "email": user.email,
                "name": user.name,
                "status": user.status,
            },
        }
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create user {request.email}: {e}", exc_info=True)
        raise handle_database_error(e, "create_user")


@router.put("/users/{user_id}")
def update_user(
    user_id: int,
    request: AdminUserUpdate,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Rename a user or change their status."""
    try:
        user = get_by_id(db, User, user_id, "User not found")

        changed = []
        if "name" in request.model_fields_set:
            user.name = request.name
            changed.append("name")
        if request.status:
            user.status = request.status
            changed.append("status")

        if not changed:
            raise validation_error("No fields to update")

        db.commit()
        logger.info(f"Admin updated user {user_id}: {', '.join(changed)}")
        return {"message": "User updated successfully"}
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update user {user_id}: {e}", exc_info=True)
        raise handle_database_error(e, "update_user")


@router.delete("/users/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Suspend a user who owns no sites; users are never hard-deleted."""
    try:
        user = get_by_id(db, User, user_id, "User not found")

        sites_count = count_owned_sites(db, user.id)
        if sites_count > 0:
            raise validation_error("Cannot delete user with active sites", sites_count=sites_count)

        user.status = UserStatus.SUSPENDED
        db.commit()

        logger.info(f"Admin suspended user {user_id}")
        return {"message": "User suspended successfully"}
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete user {user_id}: {e}", exc_info=True)
        raise handle_database_error(e, "delete_user")


@router.post("/users/{user_id}/reset-password")
def reset_user_password(
    user_id: int,
    request: PasswordResetRequest,
    db: Session = Depends(get_db),
) -> dict[str, str]:
    """Set a new password for a user."""
    try:
        user = get_by_id(db, User, user_id, "User not found")
        reset_password(db, user, request.newPassword)
        return {"message": "Password reset successfully"}
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to reset password for user {user_id}: {e}", exc_info=True)
        raise handle_database_error(e, "reset_password")
