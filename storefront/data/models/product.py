from datetime import datetime, timezone
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Text

from storefront.data.database import Base

PRODUCT_STATUSES = ("pending", "approved", "declined")


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    merchant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)
    category = Column(String(100), nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(5, 2), nullable=False, default=0)  # procent 0-100
    quantity = Column(Integer, nullable=False, default=0)

    status = Column(String(20), nullable=False, default="pending", index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
