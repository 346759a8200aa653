"""Authentication API endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mycerti.auth.tokens import TokenIdentity, require_user
from mycerti.constants import UserStatus
from mycerti.database import get_db
from mycerti.models import User
from mycerti.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    SignupRequest,
    UserProfile,
    UserSummary,
)
from mycerti.services.credentials import authenticate, create_account, issue_user_token
from mycerti.services.sites import count_owned_sites
from mycerti.utils.db import get_by_id
from mycerti.utils.exceptions import AppException, handle_database_error, validation_error
from mycerti.utils.logger import logger

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    request: SignupRequest,
    db: Session = Depends(get_db),
) -> AuthResponse:
    """
    Create an account and return a user token.

    Args:
        request: Email, password and optional display name
        db: Database session

    Returns:
        The new user and a session token
    """
    try:
        user = create_account(db, request.email, request.password, request.name)
        return AuthResponse(
            message="User created successfully",
            user=UserSummary.from_orm(user),
            token=issue_user_token(user),
        )
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Signup failed for {request.email}: {e}", exc_info=True)
        raise handle_database_error(e, "signup")


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
) -> AuthResponse:
    """
    Exchange email and password for a user token.

    Unknown emails and wrong passwords get the same "Invalid credentials".
    """
    try:
        user = authenticate(db, request.email, request.password)
        return AuthResponse(
            message="Login successful",
            user=UserSummary.from_orm(user),
            token=issue_user_token(user),
        )
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Login error for {request.email}: {e}", exc_info=True)
        raise handle_database_error(e, "login")


@router.get("/me", response_model=MeResponse)
def get_me(
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> MeResponse:
    """Current user's profile and the number of sites they own."""
    try:
        user = get_by_id(db, User, identity.id, "User not found")
        return MeResponse(
            user=UserProfile.from_orm(user),
            sites_count=count_owned_sites(db, user.id),
        )
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to load user {identity.id}: {e}", exc_info=True)
        raise handle_database_error(e, "get_me")


@router.delete("/me")
def delete_me(
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> dict[str, str]:
    """
    Close the caller's account.

    The account is suspended, not removed, and only once it owns no sites.
    Tokens already issued stay valid until they expire.
    """
    try:
        user = get_by_id(db, User, identity.id, "User not found")

        sites_count = count_owned_sites(db, user.id)
        if sites_count > 0:
            raise validation_error("Cannot delete user with active sites", sites_count=sites_count)

        user.status = UserStatus.SUSPENDED
        db.commit()

        logger.info(f"User {user.id} closed their account")
        return {"message": "Account deleted successfully"}
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete account {identity.id}: {e}", exc_info=True)
        raise handle_database_error(e, "delete_me")
