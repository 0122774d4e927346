# storefront/api/routers/coupons.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.security import require_role
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    ApplyCouponIn,
    AppliedCouponOut,
    CheckoutSummaryOut,
    CouponCreateIn,
    CouponOut,
)
from storefront.services.checkout_service import CheckoutService
from storefront.services.coupon_service import CouponService

router = APIRouter(prefix="/api", tags=["coupons"])


def get_service(db: Session):
    return CouponService(db)


@router.post("/coupons", response_model=CouponOut, status_code=201)
def create_coupon(
    payload: CouponCreateIn,
    merchant: UserModel = Depends(require_role("merchant")),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.create_coupon(merchant, payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/coupons/merchant/{merchant_id}", response_model=List[CouponOut])
def list_merchant_coupons(merchant_id: int, db: Session = Depends(get_db)):
    return get_service(db).list_by_merchant(merchant_id)


@router.delete("/coupons/{coupon_id}")
def delete_coupon(
    coupon_id: int,
    merchant: UserModel = Depends(require_role("merchant", "admin")),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_coupon(merchant, coupon_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"deleted": True}


@router.put("/coupons/{coupon_id}/use", response_model=CouponOut)
def use_coupon(coupon_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.mark_used(coupon_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/checkout/apply-coupon", response_model=AppliedCouponOut)
def apply_coupon(payload: ApplyCouponIn, db: Session = Depends(get_db)):
    """
    Podglad rabatu dla koszyka klienta. Nie zuzywa kuponu.
    """
    svc = get_service(db)
    try:
        return svc.apply_coupon(payload.code, payload.user_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/checkout/summary/{customer_id}", response_model=CheckoutSummaryOut)
def checkout_summary(
    customer_id: int,
    code: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    svc = CheckoutService(db)
    try:
        return svc.summary(customer_id, code)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
