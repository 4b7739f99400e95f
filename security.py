import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from passlib.context import CryptContext

from config import Settings, get_app_settings
from errors import TokenInvalidError, TokenMissingError

logger = logging.getLogger(__name__)

# Missing credentials are answered by require_token, not by HTTPBearer
security = HTTPBearer(auto_error=False)


# ---------------- PASSWORD UTILS ---------------- #

def build_password_context(settings: Settings) -> CryptContext:
    """Argon2 context with the configured work factor"""
    return CryptContext(
        schemes=["argon2"],
        deprecated="auto",
        argon2__rounds=settings.PASSWORD_HASH_ROUNDS,
    )


def get_password_context(request: Request) -> CryptContext:
    return request.app.state.pwd_context


def hash_password(pwd_context: CryptContext, password: str) -> str:
    """Hash password using Argon2"""
    return pwd_context.hash(password)


def verify_password(pwd_context: CryptContext, plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password using Argon2.

    Without a stored hash a dummy verification still runs, so an unknown
    user costs the same time as a wrong password.
    """
    if hashed_password is None:
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(plain_password, hashed_password)


# ---------------- TOKEN UTILS ---------------- #

def create_access_token(
    user_id: int,
    settings: Settings,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a JWT access token"""
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode = {
        "sub": str(user_id),
        "iat": now,
        "exp": expire,
        "type": "access"
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def verify_access_token(token: str, settings: Settings) -> int:
    """Verify a JWT access token and return the user id it was issued for"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        logger.info("Rejected token: %s", exc)
        raise TokenInvalidError() from exc

    if payload.get("type") != "access":
        logger.info("Rejected token: wrong token type")
        raise TokenInvalidError()

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        logger.info("Rejected token: bad subject")
        raise TokenInvalidError() from exc


async def require_token(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        settings: Settings = Depends(get_app_settings)
) -> int:
    """Gate for every route except registration and login"""
    if credentials is None:
        raise TokenMissingError()

    user_id = verify_access_token(credentials.credentials, settings)
    request.state.user_id = user_id
    return user_id
