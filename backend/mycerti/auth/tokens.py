"""Session token issuing and bearer authentication.

Two trust domains exist, ``user`` and ``admin``. Each signs with its own
secret and stamps a ``domain`` claim, so a token from one domain is never
accepted by the other. Verification is pure computation: the token payload is
trusted until it expires and the database is not consulted.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mycerti.config import settings
from mycerti.constants import TokenDomain
from mycerti.utils.exceptions import authentication_error

_bearer = HTTPBearer(auto_error=False, scheme_name="bearerAuth")

_REQUIRED_CLAIMS = ["exp", "iat", "sub"]


@dataclass(frozen=True)
class TokenIdentity:
    """Identity bound to a request after its token was verified."""
    id: int
    email: str
    name: Optional[str]
    role: str
    domain: str


def _secret_for(domain: str) -> str:
    if domain == TokenDomain.ADMIN:
        return settings.admin_jwt_secret
    if domain == TokenDomain.USER:
        return settings.user_jwt_secret
    raise ValueError(f"unknown token domain: {domain}")


def issue_token(
    *,
    user_id: int,
    email: str,
    name: Optional[str],
    role: str,
    domain: str = TokenDomain.USER,
    expires_in: Optional[timedelta] = None,
) -> str:
    """
    Sign a session token for ``domain``.

    Args:
        user_id: Identity id
        email: Identity email
        name: Display name (may be None)
        role: Role claim (``user`` or ``super_admin``)
        domain: Trust domain selecting the signing secret
        expires_in: Lifetime, defaults to ``token_expire_days``

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    exp = now + (expires_in if expires_in is not None else timedelta(days=settings.token_expire_days))
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "id": user_id,
        "email": email,
        "name": name,
        "role": role,
        "domain": domain,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, _secret_for(domain), algorithm=settings.jwt_algorithm)


def verify_token(token: str, domain: str = TokenDomain.USER) -> Optional[TokenIdentity]:
    """
    Decode ``token`` with the secret of ``domain``.

    Returns:
        The bound identity, or None when the signature, expiry, claims or
        domain do not check out.
    """
    try:
        payload = jwt.decode(
            token,
            _secret_for(domain),
            algorithms=[settings.jwt_algorithm],
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.InvalidTokenError:
        return None

    if payload.get("domain") != domain:
        return None

    try:
        return TokenIdentity(
            id=int(payload["sub"]),
            email=payload["email"],
            name=payload.get("name"),
            role=payload["role"],
            domain=domain,
        )
    except (KeyError, TypeError, ValueError):
        return None


def require_token(domain: str) -> Callable[..., TokenIdentity]:
    """
    Build a FastAPI dependency that authenticates against one trust domain.

    Args:
        domain: ``user`` or ``admin``

    Returns:
        Dependency returning the verified TokenIdentity
    """
    def _dependency(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    ) -> TokenIdentity:
        # HTTPBearer yields None for a missing header or a non-Bearer scheme
        if credentials is None or not credentials.credentials:
            raise authentication_error("No token provided")

        identity = verify_token(credentials.credentials, domain)
        if identity is None:
            raise authentication_error("Invalid token")
        return identity

    _dependency.__name__ = f"require_{domain}"
    return _dependency


require_user = require_token(TokenDomain.USER)
require_admin = require_token(TokenDomain.ADMIN)
