#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import CartAddIn, CartQuantityIn, CartOut
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.post("", response_model=CartOut)
def add_item(payload: CartAddIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.add_item(payload.customer_id, payload.product_id, payload.quantity)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{customer_id}", response_model=CartOut)
def get_cart(customer_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_cart(customer_id)


@router.put("/{customer_id}/{product_id}", response_model=CartOut)
def set_quantity(
    customer_id: int,
    product_id: int,
    payload: CartQuantityIn,
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.set_quantity(customer_id, product_id, payload.quantity)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{customer_id}/{product_id}", response_model=CartOut)
def remove_item(customer_id: int, product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.remove_item(customer_id, product_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{customer_id}")
def clear_cart(customer_id: int, db: Session = Depends(get_db)):
    get_service(db).clear(customer_id)
    return {"cleared": True}
