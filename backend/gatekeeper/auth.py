import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from gatekeeper.config import settings
from gatekeeper.errors import GatekeeperError
from gatekeeper.schemas.auth import TokenData, User, UserInDB
from gatekeeper.schemas.claims import UnverifiedClaims
from gatekeeper.utils.claims import extract_token_claims_unverified

log = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_v1_str}/token")


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt


# Demo user (in production, fetch from DB) - lazy loaded to avoid hashing at import
_DEMO_USER = None


def get_demo_user():
    global _DEMO_USER
    if _DEMO_USER is None:
        _DEMO_USER = UserInDB(
            username=settings.admin_username,
            email="admin@example.com",
            full_name="Admin User",
            disabled=False,
            hashed_password=get_password_hash(settings.admin_password)
        )
    return _DEMO_USER


def get_user(username: str):
    demo_user = get_demo_user()
    if username == demo_user.username:
        return demo_user
    return None


def authenticate_user(username: str, password: str):
    user = get_user(username)
    if not user:
        return False
    if not verify_password(password, user.hashed_password):
        return False
    return user


def describe_unverified(token: str) -> str:
    """Best-effort summary of who a token claims to be, for log lines only."""
    try:
        claims = extract_token_claims_unverified(token, UnverifiedClaims)
    except GatekeeperError as exc:
        return f"<claims unavailable: {exc.kind}>"
    return f"sub={claims.sub!r} iss={claims.iss!r}"


def get_current_user(token: Annotated[str, Depends(oauth2_scheme)]):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        username: str = payload.get("sub")
        if username is None:
            raise credentials_exception
        token_data = TokenData(username=username)
    except JWTError as err:
        log.warning(f"Rejected token ({describe_unverified(token)}): {err}")
        raise credentials_exception
    user = get_user(token_data.username)
    if user is None:
        raise credentials_exception
    return user


def get_current_active_user(current_user: Annotated[User, Depends(get_current_user)]):
    if current_user.disabled:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user
