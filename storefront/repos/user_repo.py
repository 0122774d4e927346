from sqlalchemy import select
from sqlalchemy.orm import Session
from storefront.data.models.user import UserModel

class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email.lower())
        ).scalar_one_or_none()

    def get_users(self, user_ids) -> dict[int, UserModel]:
        if not user_ids:
            return {}
        users = self.db.execute(
            select(UserModel).where(UserModel.id.in_(list(user_ids)))
        ).scalars().all()
        return {u.id: u for u in users}

    def find_by_role(self, role: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.role == role).limit(1)
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
