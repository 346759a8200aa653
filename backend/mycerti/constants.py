"""Application-wide constants."""


class UserStatus:
    """User account status constants."""
    ACTIVE = "active"
    SUSPENDED = "suspended"

    ALL = (ACTIVE, SUSPENDED)


class SiteStatus:
    """Site status constants."""
    ACTIVE = "active"
    SUSPENDED = "suspended"

    ALL = (ACTIVE, SUSPENDED)


class SitePlan:
    """Site plan constants."""
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"

    ALL = (FREE, PRO, ENTERPRISE)


class SiteRole:
    """Membership roles on a site."""
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class PageStatus:
    """Page status constants."""
    DRAFT = "draft"
    PUBLISHED = "published"


class PublishJobStatus:
    """Publish job status constants."""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class TokenDomain:
    """Trust domains; each signs tokens with its own secret."""
    USER = "user"
    ADMIN = "admin"


class IdentityRole:
    """Role claim carried in tokens."""
    USER = "user"
    SUPER_ADMIN = "super_admin"


# Maximum number of sites a user may own, checked against the requested plan
PLAN_SITE_LIMITS = {
    SitePlan.FREE: 1,
    SitePlan.PRO: 5,
    SitePlan.ENTERPRISE: 999,
}

# Default resource quotas assigned at creation and on plan change
PLAN_QUOTAS = {
    SitePlan.FREE: {"pages": 10, "assets_mb": 100},
    SitePlan.PRO: {"pages": 100, "assets_mb": 1000},
    SitePlan.ENTERPRISE: {"pages": 1000, "assets_mb": 10000},
}

# Home page created with every new site
DEFAULT_HOME_PAGE = {
    "path": "/",
    "title": "Welcome",
    "content_html": "<h1>Welcome to your new site!</h1><p>Start building your homepage.</p>",
}

SUBDOMAIN_PATTERN = r"^[a-z0-9-]+$"

MIN_PASSWORD_LENGTH = 6

# Dashboard window for "recent" publish jobs
RECENT_PUBLISH_DAYS = 7

# Fixed id of the configured admin account in admin tokens
ADMIN_IDENTITY_ID = 1
