from sqlalchemy import Column, Integer, String, ForeignKey, Index
from linkfolio.db.base import Base
from linkfolio.models.user import new_id


class Social(Base):
    """Social icon shown on the public profile."""
    __tablename__ = "socials"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    platform = Column(String(50), nullable=False)
    url = Column(String, nullable=False, default="")
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_socials_user_position", "user_id", "position"),
    )


class MenuSocial(Base):
    """Social icon shown on the public menu. Shares the socials quota."""
    __tablename__ = "menu_socials"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    platform = Column(String(50), nullable=False)
    url = Column(String, nullable=False, default="")
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_menu_socials_user_position", "user_id", "position"),
    )
