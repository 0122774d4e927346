# storefront/services/coupon_service.py
import secrets
import string
from datetime import datetime, timezone
from typing import Dict, Any, List, Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import (
    NotFoundError,
    InvalidArgumentError,
    InvalidCouponError,
    NotApplicableError,
    ConflictError,
    ForbiddenError,
)
from storefront.domain.pricing import PricedLine, applicable_lines, coupon_discount, money
from storefront.domain.schemas import CouponCreateIn
from storefront.repos.coupon_repo import CouponRepo
from storefront.services.cart_service import CartService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 8


def as_utc(value: datetime) -> datetime:
    # sqlite gubi strefe, traktujemy naive jako UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def generate_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def coupon_to_dict(coupon: CouponModel) -> Dict[str, Any]:
    return {
        "id": coupon.id,
        "code": coupon.code,
        "merchant_id": coupon.merchant_id,
        "discount_percentage": coupon.discount_percentage,
        "expiry_date": coupon.expiry_date,
        "description": coupon.description,
        "is_used": coupon.is_used,
        "is_active": coupon.is_active,
        "created_at": coupon.created_at,
    }


class CouponService:
    """
    Kupony sprzedawcow.

    Stany: Active -> Used (terminalny). Expired/Inactive nie sa zapisywane,
    wyliczane przy walidacji z expiry_date i is_active.
    apply_coupon tylko wycenia (podglad), zuzycie dopiero mark_used.
    """

    def __init__(self, db: Session):
        self.repo = CouponRepo(db)
        self.carts = CartService(db)

    #query
    def list_by_merchant(self, merchant_id: int) -> List[Dict[str, Any]]:
        return [coupon_to_dict(c) for c in self.repo.list_by_merchant(merchant_id)]

    def validate(self, code: str, now: datetime | None = None, consuming: bool = False) -> CouponModel:
        """consuming=True przy finalizacji: zuzyty kupon to konflikt (409), nie zly kod."""
        now = now or datetime.now(timezone.utc)

        coupon = self.repo.get_by_code(code.strip().upper())
        if not coupon:
            raise InvalidCouponError("Invalid coupon code")
        if coupon.is_used:
            if consuming:
                raise ConflictError("Coupon has already been used")
            raise InvalidCouponError("Coupon has already been used")
        if not coupon.is_active:
            raise InvalidCouponError("Coupon is not active")
        if as_utc(coupon.expiry_date) <= now:
            raise InvalidCouponError("Coupon has expired")
        return coupon

    def evaluate(self, coupon: CouponModel, lines: Iterable[PricedLine]) -> Dict[str, Any]:
        lines = list(lines)
        if not applicable_lines(lines, coupon.merchant_id):
            raise NotApplicableError("Coupon is not applicable to any item in your cart")

        discount = coupon_discount(lines, coupon.merchant_id, coupon.discount_percentage)
        return {
            "coupon_id": coupon.id,
            "code": coupon.code,
            "discount_percentage": coupon.discount_percentage,
            "discount_amount": money(discount),
            "merchant_id": coupon.merchant_id,
        }

    def apply_coupon(self, code: str, user_id: int) -> Dict[str, Any]:
        coupon = self.validate(code)
        applied = self.evaluate(coupon, self.carts.get_priced_lines(user_id))
        logger.info(
            f"Coupon {coupon.code} previewed for customer {user_id}: "
            f"-{applied['discount_amount']}"
        )
        return applied

    #commands
    def create_coupon(self, merchant: UserModel, payload: CouponCreateIn) -> Dict[str, Any]:
        if as_utc(payload.expiry_date) <= datetime.now(timezone.utc):
            raise InvalidArgumentError("Expiry date must be in the future")

        code = payload.code
        if code and self.repo.get_by_code(code):
            raise ConflictError(f"Coupon code {code} already exists")
        if not code:
            code = generate_code()
            while self.repo.get_by_code(code):
                code = generate_code()

        coupon = CouponModel(
            code=code,
            merchant_id=merchant.id,
            discount_percentage=payload.discount_percentage,
            expiry_date=as_utc(payload.expiry_date),
            description=payload.description,
            is_used=False,
            is_active=True,
        )
        try:
            created = self.repo.create_coupon(coupon)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError(f"Coupon code {code} already exists")

        logger.info(f"Merchant {merchant.id} created coupon {created.code} ({created.discount_percentage}%)")
        return coupon_to_dict(created)

    def delete_coupon(self, merchant: UserModel, coupon_id: int) -> None:
        coupon = self.repo.get_coupon(coupon_id)
        if not coupon:
            raise NotFoundError("Coupon not found")
        if merchant.role != "admin" and coupon.merchant_id != merchant.id:
            raise ForbiddenError("You can only delete your own coupons")
        if coupon.is_used:
            #zuzyty kupon jest czescia historii transakcji
            raise ConflictError("Used coupons cannot be deleted")
        self.repo.delete_coupon(coupon)
        logger.info(f"Coupon {coupon_id} deleted")

    def consume(self, coupon_id: int) -> None:
        """Warunkowe oznaczenie jako zuzyty, bez commita (commit robi wywolujacy)."""
        if self.repo.mark_used(coupon_id) == 0:
            if not self.repo.get_coupon(coupon_id):
                raise NotFoundError("Coupon not found")
            raise ConflictError("Coupon has already been used")

    def mark_used(self, coupon_id: int) -> Dict[str, Any]:
        try:
            self.consume(coupon_id)
        except (NotFoundError, ConflictError):
            self.repo.rollback()
            raise
        self.repo.commit()

        coupon = self.repo.get_coupon(coupon_id)
        logger.info(f"Coupon {coupon.code} marked as used")
        return coupon_to_dict(coupon)
