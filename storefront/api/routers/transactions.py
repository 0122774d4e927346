# storefront/api/routers/transactions.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.security import require_role
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    MerchantCustomerOut,
    TransactionCreateIn,
    TransactionOut,
    TransactionStatusIn,
)
from storefront.services.checkout_service import CheckoutService
from storefront.services.transaction_service import TransactionService

router = APIRouter(prefix="/api", tags=["transactions"])


def get_checkout_service(db: Session):
    return CheckoutService(db)


def get_service(db: Session):
    return TransactionService(db)


@router.post("/transactions", response_model=TransactionOut, status_code=201)
def create_transaction(payload: TransactionCreateIn, db: Session = Depends(get_db)):
    """
    Finalizacja zamowienia po udanej platnosci:
    kupon, zapis transakcji i czyszczenie koszyka w jednej transakcji bazy.
    """
    svc = get_checkout_service(db)
    try:
        return svc.finalize_order(payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/transactions/{user_id}", response_model=List[TransactionOut])
def list_transactions(user_id: int, db: Session = Depends(get_db)):
    return get_service(db).list_for_user(user_id)


@router.put("/transactions/{transaction_id}/status", response_model=TransactionOut)
def update_transaction_status(
    transaction_id: int,
    payload: TransactionStatusIn,
    admin: UserModel = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_status(transaction_id, payload.status)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/merchant/{merchant_id}/customers", response_model=List[MerchantCustomerOut])
def merchant_customers(merchant_id: int, db: Session = Depends(get_db)):
    return get_service(db).list_merchant_customers(merchant_id)
