from sqlalchemy import Column, Integer, ForeignKey, String, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class TransactionItemModel(Base):
    """Snapshot pozycji w chwili zakupu, nie zmienia sie razem z katalogiem."""

    __tablename__ = "transaction_items"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False)

    # bez FK - produkt moze zostac usuniety, historia zostaje
    product_id = Column(Integer, nullable=False)
    merchant_id = Column(Integer, nullable=False, index=True)
    name = Column(String(200), nullable=False)

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(5, 2), nullable=False, default=0)

    transaction = relationship("TransactionModel", back_populates="items")
