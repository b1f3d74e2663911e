from typing import List, Optional

from sqlalchemy.orm import Session

from linkfolio.models.link import Link


class LinkRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_user(self, user_id: str, only_active: bool = False) -> List[Link]:
        query = self.db.query(Link).filter(Link.user_id == user_id)
        if only_active:
            query = query.filter(Link.active.is_(True))
        return query.order_by(Link.position.asc(), Link.created_at.asc()).all()

    def get_by_id(self, link_id: str, user_id: str) -> Optional[Link]:
        return (
            self.db.query(Link)
            .filter(Link.id == link_id, Link.user_id == user_id)
            .first()
        )

    def create(self, link: Link) -> Link:
        self.db.add(link)
        self.db.commit()
        self.db.refresh(link)
        return link

    def update(self, link: Link) -> Link:
        self.db.commit()
        self.db.refresh(link)
        return link

    def delete(self, link: Link) -> None:
        self.db.delete(link)
        self.db.commit()
