"""Admin login endpoint."""
from typing import Any

from fastapi import APIRouter

from mycerti.schemas.auth import LoginRequest
from mycerti.services.credentials import admin_login
from mycerti.utils.exceptions import AppException, InternalError
from mycerti.utils.logger import logger

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login")
def login(request: LoginRequest) -> dict[str, Any]:
    """
    Log in as the configured admin account.

    The admin account lives in configuration, not in the users table. Any
    mismatch answers "Invalid admin credentials" without saying which field
    was wrong.

    Returns:
        Admin identity and an admin-domain token
    """
    try:
        admin, token = admin_login(request.email, request.password)
        logger.info("Admin login successful")
        return {
            "message": "Admin login successful",
            "admin": admin,
            "token": token,
        }
    except AppException:
        logger.warning("Rejected admin login attempt")
        raise
    except Exception as e:
        logger.error(f"Admin login error: {e}", exc_info=True)
        raise InternalError("Internal server error")
