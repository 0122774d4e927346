from datetime import datetime, timezone
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Boolean

from storefront.data.database import Base


class CouponModel(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True)
    code = Column(String(32), nullable=False, unique=True, index=True)
    merchant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    discount_percentage = Column(Numeric(5, 2), nullable=False)
    expiry_date = Column(DateTime(timezone=True), nullable=False)
    description = Column(String(500), nullable=True)

    is_used = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
