# storefront/api/routers/products.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.security import require_role
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import ProductIn, ProductOut, ProductStatusIn
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/api", tags=["products"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("/products", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return get_service(db).list_approved()


@router.get("/products/merchant/{merchant_id}", response_model=List[ProductOut])
def list_merchant_products(merchant_id: int, db: Session = Depends(get_db)):
    return get_service(db).list_by_merchant(merchant_id)


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_by_id(product_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductIn,
    merchant: UserModel = Depends(require_role("merchant")),
    db: Session = Depends(get_db),
):
    return get_service(db).create_product(merchant, payload)


@router.delete("/products/{product_id}")
def delete_product(
    product_id: int,
    user: UserModel = Depends(require_role("merchant", "admin")),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_product(user, product_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"deleted": True}


@router.get("/admin/products", response_model=List[ProductOut])
def admin_list_products(
    status: Optional[str] = Query(None),
    admin: UserModel = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_all(status)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/admin/products/{product_id}/status", response_model=ProductOut)
def admin_set_status(
    product_id: int,
    payload: ProductStatusIn,
    admin: UserModel = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.set_status(product_id, payload.status)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
