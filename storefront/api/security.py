# storefront/api/security.py
from datetime import datetime, timezone
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import UnauthorizedError
from storefront.services.auth_service import AuthService, decode_access_token
from storefront.services.token_store import TokenStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login")


@lru_cache
def get_token_store() -> TokenStore:
    return TokenStore()


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_claims(
    token: str = Depends(oauth2_scheme),
    store: TokenStore = Depends(get_token_store),
) -> dict:
    try:
        claims = decode_access_token(token)
    except UnauthorizedError as e:
        raise _credentials_exception(str(e))
    if store.is_revoked(claims["jti"]):
        raise _credentials_exception("Token has been revoked")
    return claims


def get_current_user(
    claims: dict = Depends(get_token_claims),
    db: Session = Depends(get_db),
) -> UserModel:
    try:
        return AuthService(db).get_user(int(claims["sub"]))
    except UnauthorizedError as e:
        raise _credentials_exception(str(e))


def require_role(*roles: str):
    def dependency(user: UserModel = Depends(get_current_user)) -> UserModel:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="Not allowed for this account type")
        return user

    return dependency


def seconds_until(exp) -> int:
    return int(exp - datetime.now(timezone.utc).timestamp())
