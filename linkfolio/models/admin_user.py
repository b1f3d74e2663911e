from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from linkfolio.db.base import Base
from linkfolio.models.user import new_id


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
