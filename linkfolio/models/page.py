from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from linkfolio.db.base import Base
from linkfolio.models.user import new_id

BLOCK_TYPES = ("link", "text", "media")


class Page(Base):
    __tablename__ = "pages"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    blocks = relationship(
        "Block",
        back_populates="page",
        cascade="all, delete-orphan",
        order_by="Block.position",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "slug", name="uq_pages_user_slug"),
    )


class Block(Base):
    __tablename__ = "blocks"

    id = Column(String(36), primary_key=True, default=new_id)
    page_id = Column(String(36), ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # link, text, media
    content = Column(JSON, nullable=False, default=dict)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    page = relationship("Page", back_populates="blocks")

    __table_args__ = (
        Index("idx_blocks_page_position", "page_id", "position"),
    )
