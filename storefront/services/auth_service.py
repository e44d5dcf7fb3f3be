# storefront/services/auth_service.py
from datetime import timedelta
from typing import Tuple

from sqlalchemy.orm import Session

from storefront.data.models.otp import OtpModel
from storefront.data.models.user import UserModel
from storefront.domain.exceptions import AuthError, NotFoundError, ValidationFailed
from storefront.domain.schemas import RegisterIn
from storefront.repos.otp_repo import OtpRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.notification_service import NotificationService
from storefront.utils import security
from storefront.utils.settings import (
    OTP_LENGTH,
    OTP_MAX_ATTEMPTS,
    OTP_TTL_SECONDS,
    RESET_TOKEN_TTL_SECONDS,
    VERIFICATION_TOKEN_TTL_SECONDS,
)
from storefront.utils.timeutil import as_utc, utcnow
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    """
    Rejestracja, logowanie (email + haslo, telefon + OTP), weryfikacja emaila
    i reset hasla. Zwraca modele / tokeny; ciasteczka ustawia router.
    """

    def __init__(self, db: Session, notifications: NotificationService | None = None):
        self.users = UserRepo(db)
        self.otps = OtpRepo(db)
        self.notifications = notifications or NotificationService()

    def _check_password(self, password: str):
        problem = security.password_problem(password)
        if problem:
            raise ValidationFailed(problem)

    def _issue_session(self, user: UserModel) -> Tuple[UserModel, str]:
        user.last_login = utcnow()
        user = self.users.save(user)
        return user, security.create_access_token(user.id)

    # -------------------------------------------------------------------
    # rejestracja i weryfikacja emaila
    # -------------------------------------------------------------------
    def register(self, payload: RegisterIn) -> UserModel:
        self._check_password(payload.password)

        email = payload.email.lower()
        if self.users.get_by_email(email):
            raise ValidationFailed("User already exists with this email")
        if self.users.get_by_phone(payload.phone):
            raise ValidationFailed("User already exists with this phone number")

        raw, digest = security.new_url_token()
        user = UserModel(
            name=payload.name.strip(),
            email=email,
            phone=payload.phone,
            password_hash=security.hash_password(payload.password),
            role="user",
            is_verified=False,
            verification_token=digest,
            verification_token_expires_at=utcnow() + timedelta(seconds=VERIFICATION_TOKEN_TTL_SECONDS),
        )
        created = self.users.create_user(user)
        logger.info(f"Registered user {created.id} ({created.email})")

        self.notifications.send_verification_email(created.email, created.name, raw)
        return created

    def verify_email(self, raw_token: str) -> UserModel:
        user = self.users.get_by_verification_token(security.hash_token(raw_token))
        expires = as_utc(user.verification_token_expires_at) if user else None
        if not user or not expires or expires < utcnow():
            raise ValidationFailed("Invalid or expired verification token")

        user.is_verified = True
        user.verification_token = None
        user.verification_token_expires_at = None
        logger.info(f"Email verified for user {user.id}")
        return self.users.save(user)

    # -------------------------------------------------------------------
    # logowanie
    # -------------------------------------------------------------------
    def login_with_email(self, email: str, password: str) -> Tuple[UserModel, str]:
        user = self.users.get_by_email(email)
        if not user:
            raise NotFoundError("Invalid credentials")
        if not security.verify_password(password, user.password_hash):
            raise AuthError("Invalid credentials")
        if not user.is_verified:
            raise AuthError("Please verify your email before logging in")

        logger.info(f"User {user.id} logged in with email")
        return self._issue_session(user)

    def request_phone_otp(self, phone: str) -> None:
        user = self.users.get_by_phone(phone)
        if not user:
            raise NotFoundError("No account is registered with this phone number")

        code = security.generate_otp(OTP_LENGTH)
        self.otps.replace_for_phone(
            OtpModel(
                phone=phone,
                code_hash=security.hash_token(code),
                expires_at=utcnow() + timedelta(seconds=OTP_TTL_SECONDS),
                attempts=0,
            )
        )
        logger.info(f"OTP issued for user {user.id}")
        self.notifications.send_otp(phone, code)

    def verify_phone_otp(self, phone: str, otp: str) -> Tuple[UserModel, str]:
        record = self.otps.latest_for_phone(phone)
        if not record:
            raise ValidationFailed("Invalid or expired OTP")

        if as_utc(record.expires_at) < utcnow():
            # wygasly kod - usuwamy od razu
            self.otps.delete_for_phone(phone)
            self.otps.commit()
            raise ValidationFailed("Invalid or expired OTP")

        if record.attempts >= OTP_MAX_ATTEMPTS:
            self.otps.delete_for_phone(phone)
            self.otps.commit()
            raise ValidationFailed("Too many failed attempts, request a new OTP")

        if not security.constant_time_equals(record.code_hash, security.hash_token(otp)):
            record.attempts += 1
            remaining = OTP_MAX_ATTEMPTS - record.attempts
            if remaining <= 0:
                self.otps.delete_for_phone(phone)
            self.otps.commit()
            raise ValidationFailed("Invalid or expired OTP", attempts_remaining=max(remaining, 0))

        user = self.users.get_by_phone(phone)
        if not user:
            raise NotFoundError("No account is registered with this phone number")

        self.otps.delete_for_phone(phone)
        user.is_verified = True
        logger.info(f"User {user.id} logged in with OTP")
        return self._issue_session(user)

    # -------------------------------------------------------------------
    # hasla
    # -------------------------------------------------------------------
    def forgot_password(self, email: str) -> None:
        user = self.users.get_by_email(email)
        if not user:
            raise NotFoundError("There is no user with that email address")

        raw, digest = security.new_url_token()
        user.reset_password_token = digest
        user.reset_password_expires_at = utcnow() + timedelta(seconds=RESET_TOKEN_TTL_SECONDS)
        self.users.save(user)

        self.notifications.send_password_reset_email(user.email, raw)

    def reset_password(self, raw_token: str, password: str) -> UserModel:
        self._check_password(password)

        user = self.users.get_by_reset_token(security.hash_token(raw_token))
        expires = as_utc(user.reset_password_expires_at) if user else None
        if not user or not expires or expires < utcnow():
            raise ValidationFailed("Token is invalid or has expired")

        user.password_hash = security.hash_password(password)
        user.reset_password_token = None
        user.reset_password_expires_at = None
        logger.info(f"Password reset for user {user.id}")
        return self.users.save(user)

    def change_password(self, user: UserModel, current_password: str, new_password: str) -> UserModel:
        if not security.verify_password(current_password, user.password_hash):
            raise AuthError("Current password is incorrect")
        if current_password == new_password:
            raise ValidationFailed("New password must be different from the current password")
        self._check_password(new_password)

        user.password_hash = security.hash_password(new_password)
        logger.info(f"Password changed for user {user.id}")
        return self.users.save(user)
