# storefront/repos/coupon_repo.py
from typing import List
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel


class CouponRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_coupon(self, coupon_id: int) -> CouponModel | None:
        return self.db.get(CouponModel, coupon_id)

    def get_by_code(self, code: str) -> CouponModel | None:
        return self.db.execute(
            select(CouponModel).where(CouponModel.code == code)
        ).scalar_one_or_none()

    def list_by_merchant(self, merchant_id: int) -> List[CouponModel]:
        return list(
            self.db.execute(
                select(CouponModel)
                .where(CouponModel.merchant_id == merchant_id)
                .order_by(CouponModel.created_at.desc(), CouponModel.id.desc())
            ).scalars().all()
        )

    def create_coupon(self, coupon: CouponModel) -> CouponModel:
        self.db.add(coupon)
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def delete_coupon(self, coupon: CouponModel) -> None:
        self.db.delete(coupon)
        self.db.commit()

    def mark_used(self, coupon_id: int) -> int:
        """Warunkowy update, zwraca 0 gdy kupon byl juz zuzyty (albo nie istnieje)."""
        res = self.db.execute(
            update(CouponModel)
            .where(CouponModel.id == coupon_id, CouponModel.is_used.is_(False))
            .values(is_used=True)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
