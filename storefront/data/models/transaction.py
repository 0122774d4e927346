from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from storefront.data.database import Base


class TransactionModel(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)

    total_amount = Column(Numeric(10, 2), nullable=False)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    coupon_id = Column(Integer, ForeignKey("coupons.id"), nullable=True)

    payment_method = Column(String(50), nullable=False)
    payment_id = Column(String(200), nullable=False)
    status = Column(String(30), nullable=False, default="completed")  # completed, pending, refunded, cancelled
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "TransactionItemModel",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionItemModel.id",
    )
