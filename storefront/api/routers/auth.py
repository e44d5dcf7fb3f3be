# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from storefront.api.deps import (
    CART_COOKIE,
    TOKEN_COOKIE,
    clear_cookies,
    get_current_user,
    get_notification_service,
    rate_limit,
    set_auth_cookie,
)
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import (
    AuthOut,
    ChangePasswordIn,
    ForgotPasswordIn,
    LoginIn,
    MessageOut,
    OtpRequestIn,
    OtpVerifyIn,
    RegisterIn,
    ResetPasswordIn,
    UserRead,
)
from storefront.services.auth_service import AuthService
from storefront.services.cart_service import CartService
from storefront.services.notification_service import NotificationService

router = APIRouter(prefix="/auth", tags=["auth"])

HOUR = 60 * 60
QUARTER = 15 * 60


def get_service(db: Session, notifications: NotificationService):
    return AuthService(db, notifications)


def _login_response(request: Request, response: Response, db: Session, user: UserModel, token: str, message: str):
    set_auth_cookie(response, token)

    # koszyk goscia przechodzi na konto
    session_id = request.cookies.get(CART_COOKIE)
    if session_id:
        CartService(db).merge_guest_cart(user.id, session_id)
        clear_cookies(response, CART_COOKIE)

    return {"message": message, "user": user, "access_token": token, "token_type": "bearer"}


@router.post(
    "/register",
    status_code=201,
    dependencies=[Depends(rate_limit("register", 5, HOUR, "Too many accounts created, please try again after an hour"))],
)
def register(
    payload: RegisterIn,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    user = get_service(db, notifications).register(payload)
    return {
        "message": "Registration successful. Please check your email to verify your account.",
        "user": UserRead.model_validate(user),
    }


@router.get("/verify-email/{token}", response_model=MessageOut)
def verify_email(
    token: str,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    get_service(db, notifications).verify_email(token)
    return {"message": "Email verified successfully. You can now log in."}


@router.post(
    "/login/email",
    response_model=AuthOut,
    dependencies=[Depends(rate_limit("login", 10, QUARTER, "Too many login attempts, please try again after 15 minutes"))],
)
def login_with_email(
    payload: LoginIn,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    user, token = get_service(db, notifications).login_with_email(payload.email, payload.password)
    return _login_response(request, response, db, user, token, "Logged in successfully")


@router.post(
    "/phone-auth/request",
    response_model=MessageOut,
    dependencies=[Depends(rate_limit("otp-request", 5, HOUR, "Too many OTP requests, please try again after an hour"))],
)
def request_phone_otp(
    payload: OtpRequestIn,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    get_service(db, notifications).request_phone_otp(payload.phone)
    return {"message": "OTP sent successfully"}


@router.post(
    "/phone-auth/verify",
    response_model=AuthOut,
    dependencies=[Depends(rate_limit("otp-verify", 5, QUARTER, "Too many OTP attempts, please try again after 15 minutes"))],
)
def verify_phone_otp(
    payload: OtpVerifyIn,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    user, token = get_service(db, notifications).verify_phone_otp(payload.phone, payload.otp)
    return _login_response(request, response, db, user, token, "Phone verified successfully")


@router.post(
    "/forgot-password",
    response_model=MessageOut,
    dependencies=[Depends(rate_limit("forgot-password", 3, HOUR))],
)
def forgot_password(
    payload: ForgotPasswordIn,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    get_service(db, notifications).forgot_password(payload.email)
    return {"message": "Password reset link sent to your email"}


@router.post("/reset-password/{token}", response_model=MessageOut)
def reset_password(
    token: str,
    payload: ResetPasswordIn,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    get_service(db, notifications).reset_password(token, payload.password)
    return {"message": "Password has been reset. You can now log in."}


@router.get("/me", response_model=UserRead)
def me(user: UserModel = Depends(get_current_user)):
    return user


@router.post("/logout", response_model=MessageOut)
def logout(response: Response):
    clear_cookies(response, TOKEN_COOKIE, CART_COOKIE)
    return {"message": "Logged out successfully"}


@router.post(
    "/change-password",
    response_model=MessageOut,
    dependencies=[Depends(rate_limit("change-password", 3, HOUR))],
)
def change_password(
    payload: ChangePasswordIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    get_service(db, notifications).change_password(user, payload.current_password, payload.new_password)
    return {"message": "Password changed successfully"}
