from typing import List, Optional

from sqlalchemy.orm import Session

from linkfolio.models.social import Social


class SocialRepository:
    """Works for both profile socials and menu socials (same columns)."""

    def __init__(self, db: Session, model=Social):
        self.db = db
        self.model = model

    def list_by_user(self, user_id: str) -> List:
        return (
            self.db.query(self.model)
            .filter(self.model.user_id == user_id)
            .order_by(self.model.position.asc())
            .all()
        )

    def get_by_id(self, social_id: str, user_id: str) -> Optional[object]:
        return (
            self.db.query(self.model)
            .filter(self.model.id == social_id, self.model.user_id == user_id)
            .first()
        )

    def create(self, social):
        self.db.add(social)
        self.db.commit()
        self.db.refresh(social)
        return social

    def update(self, social):
        self.db.commit()
        self.db.refresh(social)
        return social

    def delete(self, social) -> None:
        self.db.delete(social)
        self.db.commit()
