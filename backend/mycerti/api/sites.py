"""Site endpoints for signed-in users."""
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mycerti.auth.tokens import TokenIdentity, require_user
from mycerti.database import get_db
from mycerti.schemas.site import SiteCreate, SiteResponse, SiteUpdate
from mycerti.services import sites as site_service
from mycerti.utils.exceptions import AppException, handle_database_error, validation_error
from mycerti.utils.logger import logger
from mycerti.utils.serialization import serialize_model_to_dict

router = APIRouter(prefix="/sites", tags=["sites"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_site(
    request: SiteCreate,
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    Create a site owned by the caller.

    Args:
        request: Name, subdomain and plan (default "free")
        identity: Caller from the user token
        db: Database session

    Returns:
        The created site with its plan quotas
    """
    try:
        site = site_service.create_site(
            db,
            owner_id=identity.id,
            name=request.name,
            subdomain=request.subdomain,
            plan=request.plan,
        )
        return {
            "message": "Site created successfully",
            "site": SiteResponse.from_orm(site),
        }
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create site for user {identity.id}: {e}", exc_info=True)
        raise handle_database_error(e, "create_site")


@router.get("")
def list_sites(
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> dict[str, list[dict[str, Any]]]:
    """List sites the caller owns or is a member of."""
    try:
        rows = site_service.list_accessible_sites(db, identity.id)
        sites = []
        for site, role, published_pages, total_pages in rows:
            item = serialize_model_to_dict(site)
            item.update(role=role, published_pages=published_pages, total_pages=total_pages)
            sites.append(item)
        return {"sites": sites}
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to list sites for user {identity.id}: {e}", exc_info=True)
        raise handle_database_error(e, "list_sites")


@router.get("/{site_id}")
def get_site(
    site_id: int,
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    Site detail with usage statistics.

    Answers 404 both when the site does not exist and when the caller has no
    access to it.
    """
    try:
        site, role = site_service.get_accessible_site(db, site_id, identity.id)
        detail = serialize_model_to_dict(site)
        detail["role"] = role
        detail["stats"] = site_service.get_site_stats(db, site.id)
        return {"site": detail}
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to get site {site_id}: {e}", exc_info=True)
        raise handle_database_error(e, "get_site")


@router.put("/{site_id}")
def update_site(
    site_id: int,
    request: SiteUpdate,
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Rename a site or change its plan (owner only); a plan change resets quotas."""
    try:
        site = site_service.get_owned_site(db, site_id, identity.id)

        changed = site_service.apply_site_updates(site, name=request.name, plan=request.plan)
        if not changed:
            raise validation_error("No fields to update")

        db.commit()
        db.refresh(site)

        logger.info(f"User {identity.id} updated site {site_id}: {', '.join(changed)}")
        return {
            "message": "Site updated successfully",
            "site": SiteResponse.from_orm(site),
        }
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update site {site_id}: {e}", exc_info=True)
        raise handle_database_error(e, "update_site")


@router.delete("/{site_id}")
def delete_site(
    site_id: int,
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> dict[str, str]:
    """Delete a site and everything attached to it (owner only)."""
    try:
        site = site_service.get_owned_site(db, site_id, identity.id)

        # Cascade delete will handle members, pages, assets and publish jobs
        db.delete(site)
        db.commit()

        logger.info(f"User {identity.id} deleted site {site_id}")
        return {"message": "Site deleted successfully"}
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete site {site_id}: {e}", exc_info=True)
        raise handle_database_error(e, "delete_site")
