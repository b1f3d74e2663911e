from typing import Optional

from sqlalchemy.orm import Session

from linkfolio.models.admin_user import AdminUser


class AdminRepository:
    def __init__(self, db: Session):
        self.db = db

    def exists(self) -> bool:
        return self.db.query(AdminUser.id).first() is not None

    def get_by_email(self, email: str) -> Optional[AdminUser]:
        return self.db.query(AdminUser).filter(AdminUser.email == email.strip().lower()).first()

    def get_by_id(self, admin_id: str) -> Optional[AdminUser]:
        return self.db.query(AdminUser).filter(AdminUser.id == admin_id).first()

    def create(self, admin: AdminUser) -> AdminUser:
        self.db.add(admin)
        self.db.commit()
        self.db.refresh(admin)
        return admin
