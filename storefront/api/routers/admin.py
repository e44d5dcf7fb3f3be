# storefront/api/routers/admin.py
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_lock_service, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import (
    BulkRoleIn,
    MessageOut,
    OrderOut,
    OrderStatusIn,
    Role,
    RoleUpdateIn,
    UserDetailOut,
    UserListOut,
    UserRead,
)
from storefront.services.admin_service import AdminService
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/dashboard")
def dashboard(
    time_range: int = Query(30, alias="timeRange", ge=1, le=3650),
    db: Session = Depends(get_db),
):
    return AdminService(db).dashboard(time_range)


@router.get("/users", response_model=UserListOut)
def list_users(
    search: str = "",
    role: Role | None = None,
    sort: str = "-created_at",
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return UserService(db).list_users(search=search, role=role, sort=sort, page=page, limit=limit)


@router.patch("/users/bulk-role")
def bulk_update_roles(
    payload: BulkRoleIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    modified = UserService(db).bulk_update_roles(payload.user_ids, payload.role, admin)
    return {"message": f"{modified} users updated", "modified_count": modified}


@router.get("/users/{user_id}", response_model=UserDetailOut)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return UserService(db).user_detail(user_id)


@router.patch("/users/{user_id}/role", response_model=UserRead)
def update_role(
    user_id: int,
    payload: RoleUpdateIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return UserService(db).update_role(user_id, payload.role, admin)


@router.delete("/users/{user_id}", response_model=MessageOut)
def delete_user(
    user_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    UserService(db).delete_user(user_id, admin)
    return {"message": "User and all related data deleted"}


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    db: Session = Depends(get_db),
    locks: LockService = Depends(get_lock_service),
):
    return OrderService(db, locks).set_status(order_id, payload.status)


@router.get("/analytics/orders")
def order_analytics(
    period: Literal["7days", "30days", "12months"] = "30days",
    db: Session = Depends(get_db),
):
    return AdminService(db).order_analytics(period)


@router.get("/analytics/inventory")
def inventory_analytics(db: Session = Depends(get_db)):
    return AdminService(db).inventory_analytics()
