from datetime import datetime

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.otp import OtpModel


class OtpRepo:
    def __init__(self, db: Session):
        self.db = db

    def replace_for_phone(self, otp: OtpModel) -> OtpModel:
        self.db.execute(delete(OtpModel).where(OtpModel.phone == otp.phone))
        self.db.add(otp)
        self.db.commit()
        self.db.refresh(otp)
        return otp

    def latest_for_phone(self, phone: str) -> OtpModel | None:
        return self.db.execute(
            select(OtpModel).where(OtpModel.phone == phone).order_by(OtpModel.id.desc()).limit(1)
        ).scalar_one_or_none()

    def delete_for_phone(self, phone: str) -> None:
        self.db.execute(delete(OtpModel).where(OtpModel.phone == phone))

    def delete_expired(self, now: datetime) -> int:
        result = self.db.execute(delete(OtpModel).where(OtpModel.expires_at < now))
        self.db.commit()
        return result.rowcount

    def commit(self):
        self.db.commit()
