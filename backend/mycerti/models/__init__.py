"""Models package."""
from mycerti.models.user import User
from mycerti.models.site import Site
from mycerti.models.site_user import SiteUser
from mycerti.models.page import Page
from mycerti.models.asset import Asset
from mycerti.models.publish_job import PublishJob

__all__ = ["User", "Site", "SiteUser", "Page", "Asset", "PublishJob"]
