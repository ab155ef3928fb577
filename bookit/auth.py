from typing import Any, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from pydantic import BaseModel

from bookit.config import Settings, get_settings
from bookit.exceptions import AuthenticationError

bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    email: str
    role: Optional[str] = None


def decode_token(token: str, settings: Settings) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as e:
        logger.warning(f"Token verification failed: {e}")
        raise AuthenticationError("Invalid or expired token")


def create_token(email: str, settings: Settings, role: Optional[str] = None) -> str:
    """Issue a bearer token, used by tooling and tests"""
    payload = {"email": email}
    if role:
        payload["role"] = role
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


# Depends on the Bearer token in the Authorization header
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    if credentials is None:
        raise AuthenticationError("No token provided")
    payload = decode_token(credentials.credentials, settings)
    if not payload.get("email"):
        raise AuthenticationError("Token carries no email")
    return CurrentUser(email=payload["email"], role=payload.get("role"))


def get_current_admin(
    user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    if user.role not in settings.admin_roles:
        logger.warning(f"User {user.email} is not an admin (role={user.role})")
        raise AuthenticationError("Not an admin")
    return user
