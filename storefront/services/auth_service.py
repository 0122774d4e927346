# storefront/services/auth_service.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import ConflictError, UnauthorizedError
from storefront.domain.schemas import SignupIn, MerchantRegisterIn
from storefront.repos.user_repo import UserRepo
from storefront.utils.settings import JWT_SECRET, JWT_ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(user: UserModel, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": str(user.id),
        "role": user.role,
        "jti": uuid.uuid4().hex,
        "exp": expire,
    }
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise UnauthorizedError("Could not validate credentials")
    if payload.get("sub") is None or payload.get("jti") is None:
        raise UnauthorizedError("Could not validate credentials")
    return payload


def user_to_dict(user: UserModel) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "business_name": user.business_name,
    }


class AuthService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def _create(self, user: UserModel) -> UserModel:
        if self.repo.get_by_email(user.email):
            raise ConflictError("An account with this email already exists")
        try:
            return self.repo.create_user(user)
        except IntegrityError:
            self.repo.db.rollback()
            raise ConflictError("An account with this email already exists")

    def signup_customer(self, payload: SignupIn) -> Dict[str, Any]:
        user = self._create(
            UserModel(
                email=payload.email.lower(),
                password_hash=get_password_hash(payload.password),
                role="customer",
                first_name=payload.first_name,
                last_name=payload.last_name,
            )
        )
        logger.info(f"Customer {user.id} signed up")
        return user_to_dict(user)

    def register_merchant(self, payload: MerchantRegisterIn) -> Dict[str, Any]:
        user = self._create(
            UserModel(
                email=payload.email.lower(),
                password_hash=get_password_hash(payload.password),
                role="merchant",
                business_name=payload.business_name,
                business_type=payload.business_type,
                phone=payload.phone,
                address=payload.address,
            )
        )
        logger.info(f"Merchant {user.id} registered ({user.business_name})")
        return user_to_dict(user)

    def create_admin(self, email: str, password: str) -> UserModel:
        return self._create(
            UserModel(
                email=email.lower(),
                password_hash=get_password_hash(password),
                role="admin",
                first_name="Admin",
            )
        )

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self.repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise UnauthorizedError("Incorrect email or password")

        logger.info(f"User {user.id} ({user.role}) logged in")
        return {
            "access_token": create_access_token(user),
            "token_type": "bearer",
            "user": user_to_dict(user),
        }

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise UnauthorizedError("Could not validate credentials")
        return user
