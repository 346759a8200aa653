"""Site ownership, membership and plan quota rules.

Users may read a site they own or belong to (a ``site_users`` row); only the
owner may update or delete it through the user API. Admin routes skip these
checks. Plans cap how many sites a user may own and set default page/storage
quotas for each site.
"""
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mycerti.constants import (
    DEFAULT_HOME_PAGE,
    PLAN_QUOTAS,
    PLAN_SITE_LIMITS,
    PageStatus,
    SiteRole,
    SiteStatus,
    UserStatus,
)
from mycerti.models import Asset, Page, Site, SiteUser, User
from mycerti.utils.exceptions import (
    NotFoundError,
    access_denied_error,
    conflict_error,
    quota_exceeded_error,
    validation_error,
)
from mycerti.utils.logger import logger

SUBDOMAIN_TAKEN_MESSAGE = "Subdomain already taken"

BYTES_PER_MB = 1024 * 1024


def plan_site_limit(plan: str) -> int:
    """Maximum number of sites a user may own when creating a site on ``plan``."""
    return PLAN_SITE_LIMITS[plan]


def default_quotas(plan: str) -> Tuple[int, int]:
    """Return (quota_pages, quota_assets_mb) for ``plan``."""
    quotas = PLAN_QUOTAS[plan]
    return quotas["pages"], quotas["assets_mb"]


def count_owned_sites(db: Session, user_id: int) -> int:
    return db.query(func.count(Site.id)).filter(Site.owner_user_id == user_id).scalar() or 0


def check_site_quota(db: Session, user_id: int, plan: str) -> None:
    """
    Refuse a new site when the user already owns as many sites as ``plan`` allows.

    Raises:
        QuotaExceededError: If the owned-site count has reached the plan limit
    """
    if count_owned_sites(db, user_id) >= plan_site_limit(plan):
        raise quota_exceeded_error(f"Site limit reached for {plan} plan")


def ensure_subdomain_available(db: Session, subdomain: str) -> None:
    if db.query(Site.id).filter(Site.subdomain == subdomain).first():
        raise conflict_error(SUBDOMAIN_TAKEN_MESSAGE)


def create_site(db: Session, owner_id: int, name: str, subdomain: str, plan: str) -> Site:
    """
    Create a site with its owner membership and a draft home page.

    The three inserts commit together. The existence check on the subdomain
    leaves a window before the insert; the unique index closes it and a
    violation is reported the same way as the pre-check.

    Raises:
        ConflictError: If the subdomain is taken
        QuotaExceededError: If the owner reached the plan's site limit
    """
    ensure_subdomain_available(db, subdomain)
    check_site_quota(db, owner_id, plan)

    quota_pages, quota_assets_mb = default_quotas(plan)
    site = Site(
        owner_user_id=owner_id,
        name=name,
        subdomain=subdomain,
        plan=plan,
        status=SiteStatus.ACTIVE,
        quota_pages=quota_pages,
        quota_assets_mb=quota_assets_mb,
    )
    try:
        db.add(site)
        db.flush()

        db.add(SiteUser(site_id=site.id, user_id=owner_id, role=SiteRole.OWNER))
        db.add(Page(
            site_id=site.id,
            path=DEFAULT_HOME_PAGE["path"],
            title=DEFAULT_HOME_PAGE["title"],
            content_html=DEFAULT_HOME_PAGE["content_html"],
            status=PageStatus.DRAFT,
            updated_by=owner_id,
        ))
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict_error(SUBDOMAIN_TAKEN_MESSAGE)
    except Exception:
        db.rollback()
        raise

    db.refresh(site)
    logger.info(f"Created site {site.id} ({site.subdomain}) for user {owner_id} on {plan} plan")
    return site


# Correlated aggregates, usable as extra columns next to Site

def published_pages_column():
    return (
        select(func.count(Page.id))
        .where(Page.site_id == Site.id, Page.status == PageStatus.PUBLISHED)
        .correlate(Site)
        .scalar_subquery()
    )


def total_pages_column():
    return select(func.count(Page.id)).where(Page.site_id == Site.id).correlate(Site).scalar_subquery()


def total_assets_column():
    return select(func.count(Asset.id)).where(Asset.site_id == Site.id).correlate(Site).scalar_subquery()


def total_size_bytes_column():
    return (
        select(func.coalesce(func.sum(Asset.size_bytes), 0))
        .where(Asset.site_id == Site.id)
        .correlate(Site)
        .scalar_subquery()
    )


def members_count_column():
    return select(func.count(SiteUser.user_id)).where(SiteUser.site_id == Site.id).correlate(Site).scalar_subquery()


def get_site_stats(db: Session, site_id: int) -> Dict[str, Any]:
    """Page and storage usage of one site."""
    published_pages = db.query(func.count(Page.id)).filter(
        Page.site_id == site_id, Page.status == PageStatus.PUBLISHED
    ).scalar() or 0
    total_pages = db.query(func.count(Page.id)).filter(Page.site_id == site_id).scalar() or 0
    total_assets = db.query(func.count(Asset.id)).filter(Asset.site_id == site_id).scalar() or 0
    total_size_bytes = db.query(func.coalesce(func.sum(Asset.size_bytes), 0)).filter(
        Asset.site_id == site_id
    ).scalar() or 0

    return {
        "published_pages": published_pages,
        "total_pages": total_pages,
        "total_assets": total_assets,
        "total_size_bytes": int(total_size_bytes),
        "storage_used_mb": round(int(total_size_bytes) / BYTES_PER_MB, 2),
    }


def list_accessible_sites(db: Session, user_id: int) -> List[Tuple[Site, Optional[str], int, int]]:
    """
    Sites the user owns or belongs to, newest first.

    Returns:
        Tuples of (site, caller's role, published_pages, total_pages)
    """
    return (
        db.query(
            Site,
            SiteUser.role,
            published_pages_column().label("published_pages"),
            total_pages_column().label("total_pages"),
        )
        .outerjoin(SiteUser, and_(SiteUser.site_id == Site.id, SiteUser.user_id == user_id))
        .filter(or_(Site.owner_user_id == user_id, SiteUser.user_id == user_id))
        .order_by(Site.created_at.desc(), Site.id.desc())
        .all()
    )


def get_accessible_site(db: Session, site_id: int, user_id: int) -> Tuple[Site, Optional[str]]:
    """
    Load a site the user may read.

    Raises:
        AuthorizationError: If the site does not exist or the user has no access
    """
    row = (
        db.query(Site, SiteUser.role)
        .outerjoin(SiteUser, and_(SiteUser.site_id == Site.id, SiteUser.user_id == user_id))
        .filter(Site.id == site_id)
        .filter(or_(Site.owner_user_id == user_id, SiteUser.user_id == user_id))
        .first()
    )
    if row is None:
        raise access_denied_error("Site")
    return row[0], row[1]


def get_owned_site(db: Session, site_id: int, user_id: int) -> Site:
    """
    Load a site the user owns.

    Raises:
        AuthorizationError: If the site does not exist or belongs to someone else
    """
    site = db.query(Site).filter(Site.id == site_id, Site.owner_user_id == user_id).first()
    if site is None:
        raise access_denied_error("Site")
    return site


def apply_site_updates(
    site: Site,
    name: Optional[str] = None,
    plan: Optional[str] = None,
    status: Optional[str] = None,
    quota_pages: Optional[int] = None,
    quota_assets_mb: Optional[int] = None,
) -> List[str]:
    """
    Mutate ``site`` in place.

    A plan change resets both quotas to the plan defaults; explicit quota
    values override the default field by field.

    Returns:
        Names of the fields that were set
    """
    changed = []

    if name:
        site.name = name
        changed.append("name")

    if plan:
        site.plan = plan
        site.quota_pages, site.quota_assets_mb = default_quotas(plan)
        changed.extend(["plan", "quota_pages", "quota_assets_mb"])

    if status:
        site.status = status
        if status == SiteStatus.ACTIVE:
            site.suspended_reason = None
        changed.append("status")

    if quota_pages is not None:
        site.quota_pages = quota_pages
        changed.append("quota_pages")

    if quota_assets_mb is not None:
        site.quota_assets_mb = quota_assets_mb
        changed.append("quota_assets_mb")

    return list(dict.fromkeys(changed))


def transfer_ownership(db: Session, site: Site, new_owner_id: int) -> int:
    """
    Hand a site to another active user.

    In one transaction: point ``sites.owner_user_id`` at the new owner, demote
    every other ``owner`` membership to ``admin`` and upsert the new owner's
    membership as ``owner``, leaving exactly one owner row.

    Returns:
        The previous owner's id

    Raises:
        NotFoundError: If the new owner does not exist or is not active
        ValidationError: If the new owner already owns the site
    """
    new_owner = db.query(User).filter(
        User.id == new_owner_id, User.status == UserStatus.ACTIVE
    ).first()
    if new_owner is None:
        raise NotFoundError("New owner not found or inactive")

    previous_owner_id = site.owner_user_id
    if previous_owner_id == new_owner.id:
        raise validation_error("User already owns this site")

    try:
        site.owner_user_id = new_owner.id

        owner_rows = db.query(SiteUser).filter(
            SiteUser.site_id == site.id,
            SiteUser.role == SiteRole.OWNER,
            SiteUser.user_id != new_owner.id,
        ).all()
        for membership in owner_rows:
            membership.role = SiteRole.ADMIN

        membership = db.get(SiteUser, (site.id, new_owner.id))
        if membership is None:
            db.add(SiteUser(site_id=site.id, user_id=new_owner.id, role=SiteRole.OWNER))
        else:
            membership.role = SiteRole.OWNER

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Transferred site {site.id} from user {previous_owner_id} to user {new_owner.id}")
    return previous_owner_id


def suspend_site(db: Session, site: Site, reason: Optional[str]) -> None:
    """Mark a site suspended and keep the reason."""
    site.status = SiteStatus.SUSPENDED
    site.suspended_reason = reason
    db.commit()
    logger.info(f"Suspended site {site.id}: {reason or 'no reason given'}")
