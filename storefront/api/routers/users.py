# storefront/api/routers/users.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.security import (
    get_current_user,
    get_token_claims,
    get_token_store,
    seconds_until,
)
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import SignupIn, MerchantRegisterIn, LoginIn, UserRead, TokenOut
from storefront.services.auth_service import AuthService, user_to_dict
from storefront.services.token_store import TokenStore

router = APIRouter(prefix="/api", tags=["users"])


@router.post("/signup", response_model=UserRead, status_code=201)
def signup(payload: SignupIn, db: Session = Depends(get_db)):
    service = AuthService(db)
    try:
        return service.signup_customer(payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/merchant/register", response_model=UserRead, status_code=201)
def register_merchant(payload: MerchantRegisterIn, db: Session = Depends(get_db)):
    service = AuthService(db)
    try:
        return service.register_merchant(payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    service = AuthService(db)
    try:
        return service.login(payload.email, payload.password)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/logout")
def logout(
    claims: dict = Depends(get_token_claims),
    store: TokenStore = Depends(get_token_store),
):
    store.revoke(claims["jti"], seconds_until(claims["exp"]))
    return {"status": "logged out"}


@router.get("/me", response_model=UserRead)
def me(user: UserModel = Depends(get_current_user)):
    return user_to_dict(user)
