from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from linkfolio.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        if not email:
            return None
        normalized = email.strip().lower()
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == normalized)
            .first()
        )

    def get_by_username(self, username: str) -> Optional[User]:
        if not username:
            return None
        return self.db.query(User).filter(User.username == username).first()

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def list_by_team(self, team_id: str) -> List[User]:
        return self.db.query(User).filter(User.team_id == team_id).all()

    def list_paginated(self, limit: int, offset: int, account_type: Optional[str] = None) -> List[User]:
        query = self.db.query(User)
        if account_type and account_type != "all":
            query = query.filter(User.account_type == account_type)
        return query.order_by(User.created_at.desc(), User.id.desc()).limit(limit).offset(offset).all()

    def count(self, account_type: Optional[str] = None) -> int:
        query = self.db.query(func.count(User.id))
        if account_type and account_type != "all":
            query = query.filter(User.account_type == account_type)
        return query.scalar() or 0

    def create(self, user: User) -> User:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user: User) -> User:
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.commit()
