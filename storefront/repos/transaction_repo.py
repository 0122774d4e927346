# storefront/repos/transaction_repo.py
from typing import List
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.transaction import TransactionModel
from storefront.data.models.transaction_item import TransactionItemModel


class TransactionRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_transaction(self, transaction: TransactionModel) -> TransactionModel:
        # bez commita - commit robi serwis razem z kuponem i koszykiem
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def get_transaction(self, transaction_id: int) -> TransactionModel | None:
        return self.db.get(TransactionModel, transaction_id)

    def list_by_user(self, user_id: int) -> List[TransactionModel]:
        return list(
            self.db.execute(
                select(TransactionModel)
                .options(selectinload(TransactionModel.items))
                .where(TransactionModel.user_id == user_id)
                .order_by(TransactionModel.created_at.desc(), TransactionModel.id.desc())
            ).scalars().all()
        )

    def list_by_merchant(self, merchant_id: int) -> List[TransactionModel]:
        ids = select(TransactionItemModel.transaction_id).where(
            TransactionItemModel.merchant_id == merchant_id
        )
        return list(
            self.db.execute(
                select(TransactionModel)
                .options(selectinload(TransactionModel.items))
                .where(TransactionModel.id.in_(ids))
                .order_by(TransactionModel.created_at.desc(), TransactionModel.id.desc())
            ).scalars().all()
        )

    def update_status(self, transaction: TransactionModel, status: str) -> TransactionModel:
        transaction.status = status
        self.db.commit()
        self.db.refresh(transaction)
        return transaction

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
