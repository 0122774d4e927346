from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime
from storefront.data.database import Base

ROLES = ("customer", "merchant", "admin")


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default="customer")

    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)

    #tylko merchant
    business_name = Column(String(200), nullable=True)
    business_type = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
