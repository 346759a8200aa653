"""Account creation, password checks and token issuing."""
import hmac
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mycerti.auth.tokens import issue_token
from mycerti.config import settings
from mycerti.constants import ADMIN_IDENTITY_ID, IdentityRole, TokenDomain, UserStatus
from mycerti.models import User
from mycerti.utils.exceptions import authentication_error, conflict_error
from mycerti.utils.hashing import dummy_password_hash, hash_password, verify_password
from mycerti.utils.logger import logger

DUPLICATE_EMAIL_MESSAGE = "User already exists"


def create_account(
    db: Session,
    email: str,
    password: str,
    name: Optional[str] = None,
    status: str = UserStatus.ACTIVE,
) -> User:
    """
    Register a new user with a bcrypt password hash.

    Emails are compared exactly (case-sensitive). The unique index on
    ``users.email`` backs up the pre-check.

    Raises:
        ConflictError: If the email is already registered
    """
    if db.query(User.id).filter(User.email == email).first():
        raise conflict_error(DUPLICATE_EMAIL_MESSAGE)

    user = User(
        email=email,
        password_hash=hash_password(password),
        name=name,
        status=status,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict_error(DUPLICATE_EMAIL_MESSAGE)
    db.refresh(user)

    logger.info(f"Created user {user.id} ({user.email})")
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """
    Check an email/password pair.

    Unknown emails and wrong passwords fail identically, and an unknown email
    still pays for one bcrypt check. Suspension is only reported once the
    password is known to be right.

    Raises:
        AuthenticationError: "Invalid credentials" or "Account is suspended"
    """
    user = db.query(User).filter(User.email == email).first()

    if user is None:
        verify_password(password, dummy_password_hash())
        raise authentication_error("Invalid credentials")

    if not verify_password(password, user.password_hash):
        raise authentication_error("Invalid credentials")

    if user.status != UserStatus.ACTIVE:
        raise authentication_error("Account is suspended")

    return user


def issue_user_token(user: User) -> str:
    """Sign a user-domain token for ``user``."""
    return issue_token(
        user_id=user.id,
        email=user.email,
        name=user.name,
        role=IdentityRole.USER,
        domain=TokenDomain.USER,
    )


def reset_password(db: Session, user: User, new_password: str) -> None:
    """Replace a user's password hash."""
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info(f"Password reset for user {user.id}")


def verify_admin_credentials(email: str, password: str) -> bool:
    """Strict comparison against the configured admin account."""
    email_ok = hmac.compare_digest(email.encode("utf-8"), settings.admin_email.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), settings.admin_password.encode("utf-8"))
    return email_ok and password_ok


def admin_login(email: str, password: str) -> Tuple[Dict[str, Any], str]:
    """
    Authenticate the configured admin and issue an admin-domain token.

    Raises:
        AuthenticationError: "Invalid admin credentials" whichever field was wrong
    """
    if not verify_admin_credentials(email, password):
        raise authentication_error("Invalid admin credentials")

    admin = {
        "id": ADMIN_IDENTITY_ID,
        "email": settings.admin_email,
        "name": settings.admin_name,
        "role": IdentityRole.SUPER_ADMIN,
    }
    token = issue_token(
        user_id=admin["id"],
        email=admin["email"],
        name=admin["name"],
        role=admin["role"],
        domain=TokenDomain.ADMIN,
    )
    return admin, token
