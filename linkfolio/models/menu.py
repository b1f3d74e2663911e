from sqlalchemy import Column, Integer, String, Boolean, Numeric, ForeignKey, Index, Text
from sqlalchemy.orm import relationship
from linkfolio.db.base import Base
from linkfolio.models.user import new_id


class MenuSection(Base):
    __tablename__ = "menu_sections"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    position = Column(Integer, nullable=False, default=0)

    # Relationships
    products = relationship(
        "MenuProduct",
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="MenuProduct.position",
    )


class MenuProduct(Base):
    __tablename__ = "menu_products"

    id = Column(String(36), primary_key=True, default=new_id)
    section_id = Column(String(36), ForeignKey("menu_sections.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    image_url = Column(String, nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)
    position = Column(Integer, nullable=False, default=0)

    # Relationships
    section = relationship("MenuSection", back_populates="products")

    __table_args__ = (
        Index("idx_menu_products_section_position", "section_id", "position"),
    )
