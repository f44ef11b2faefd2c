"""Signed-in user identity."""

from typing import Any, Mapping

from errors import PermissionDenied
from models import User

DEMO_USER = User(id="demo", name="Demo Baker", email="demo@localhost")


def user_from_claims(claims: Mapping[str, Any]) -> User:
    """Build a User from decoded identity-token claims (``sub``, ``name``...)."""
    sub = claims.get("sub")
    if not sub:
        raise PermissionDenied("Sign-in failed. Please try again.", detail="identity token has no 'sub' claim")
    return User(
        id=str(sub),
        name=str(claims.get("name") or ""),
        email=str(claims.get("email") or ""),
        picture=claims.get("picture") or None,
    )
