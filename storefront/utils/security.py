# storefront/utils/security.py
import hashlib
import hmac
import re
import secrets
from datetime import timedelta

from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from storefront.utils.settings import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRE_DAYS, BCRYPT_ROUNDS
from storefront.utils.timeutil import utcnow

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]+$")
PASSWORD_POLICY_MESSAGE = (
    "Password must contain at least one uppercase letter, one lowercase letter, "
    "one number, and one special character (@$!%*?&)"
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def password_problem(password: str) -> str | None:
    """Returns a message describing why the password is rejected, or None."""
    if len(password) < 8:
        return "Password must be at least 8 characters long"
    if len(password) > 128:
        return "Password cannot exceed 128 characters"
    if not PASSWORD_PATTERN.match(password):
        return PASSWORD_POLICY_MESSAGE
    return None


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    expire = utcnow() + (expires_delta or timedelta(days=JWT_EXPIRE_DAYS))
    return jwt.encode({"sub": str(user_id), "exp": expire}, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """Raises ExpiredSignatureError / JWTError / ValueError on a bad token."""
    payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    sub = payload.get("sub")
    if sub is None:
        raise JWTError("Token has no subject")
    return int(sub)


def new_url_token() -> tuple[str, str]:
    """(raw token for the link, sha256 digest for the database)"""
    raw = secrets.token_hex(32)
    return raw, hash_token(raw)


def hash_token(raw: str) -> str:
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def generate_otp(length: int) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))


def hmac_sha256_hex(secret: str, message: str) -> str:
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def constant_time_equals(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


__all__ = [
    "ExpiredSignatureError",
    "JWTError",
    "hash_password",
    "verify_password",
    "password_problem",
    "create_access_token",
    "decode_access_token",
    "new_url_token",
    "hash_token",
    "generate_otp",
    "hmac_sha256_hex",
    "constant_time_equals",
]
