# storefront/api/deps.py
"""
Zaleznosci FastAPI: sesja uzytkownika (JWT z ciasteczka albo naglowka),
rola admina, rate limiting i fabryki klientow zewnetrznych.
Testy podmieniaja je przez app.dependency_overrides.
"""
import uuid

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.exceptions import AccessDenied, AuthError, RateLimited
from storefront.repos.user_repo import UserRepo
from storefront.services.cart_service import CartOwner
from storefront.services.image_host import ImageHostClient
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import PaymentGatewayClient
from storefront.services.rate_limiter import RateLimiter
from storefront.utils import security
from storefront.utils.settings import (
    COOKIE_SECURE,
    GUEST_CART_TTL_SECONDS,
    JWT_EXPIRE_DAYS,
    RATE_LIMIT_ENABLED,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

TOKEN_COOKIE = "token"
CART_COOKIE = "cart_session"


# ---------------------------------------------------------------------------
# serwisy zewnetrzne
# ---------------------------------------------------------------------------

def get_lock_service() -> LockService:
    return LockService()


def get_rate_limiter() -> RateLimiter:
    return RateLimiter()


def get_payment_gateway() -> PaymentGatewayClient:
    return PaymentGatewayClient()


def get_image_host() -> ImageHostClient:
    return ImageHostClient()


def get_notification_service() -> NotificationService:
    return NotificationService()


# ---------------------------------------------------------------------------
# sesja
# ---------------------------------------------------------------------------

def _token_from_request(request: Request) -> str | None:
    token = request.cookies.get(TOKEN_COOKIE)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return None


def _user_from_token(token: str, db: Session) -> UserModel:
    try:
        user_id = security.decode_access_token(token)
    except security.ExpiredSignatureError:
        raise AuthError("Your token has expired! Please log in again.")
    except (security.JWTError, ValueError):
        raise AuthError("Invalid token. Please log in again!")

    user = UserRepo(db).get_user(user_id)
    if not user:
        raise AuthError("The user belonging to this token no longer exists.")
    return user


def get_current_user(request: Request, db: Session = Depends(get_db)) -> UserModel:
    token = _token_from_request(request)
    if not token:
        raise AuthError("You are not logged in! Please log in to get access.")
    return _user_from_token(token, db)


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> UserModel | None:
    token = _token_from_request(request)
    if not token:
        return None
    try:
        return _user_from_token(token, db)
    except AuthError:
        return None


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if user.role != "admin":
        raise AccessDenied("You do not have permission to perform this action")
    return user


def get_cart_owner(request: Request, user: UserModel | None = Depends(get_optional_user)) -> CartOwner:
    if user:
        return CartOwner(user_id=user.id)
    return CartOwner(session_id=request.cookies.get(CART_COOKIE))


# ---------------------------------------------------------------------------
# ciasteczka
# ---------------------------------------------------------------------------

def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=JWT_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="strict",
    )


def issue_cart_session(response: Response) -> str:
    session_id = uuid.uuid4().hex
    response.set_cookie(
        CART_COOKIE,
        session_id,
        max_age=GUEST_CART_TTL_SECONDS,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
    )
    return session_id


def clear_cookies(response: Response, *names: str) -> None:
    for name in names:
        response.delete_cookie(name, httponly=True, secure=COOKIE_SECURE)


# ---------------------------------------------------------------------------
# rate limiting
# ---------------------------------------------------------------------------

def rate_limit(bucket: str, limit: int, window_seconds: int, message: str | None = None):
    """Fabryka zaleznosci: limit zapytan na IP w stalym oknie (Redis)."""

    def _check(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
        if not RATE_LIMIT_ENABLED:
            return
        identity = request.client.host if request.client else "unknown"
        if not limiter.allow(bucket, identity, limit, window_seconds):
            raise RateLimited(message or "Too many requests, please try again later.")

    return _check
