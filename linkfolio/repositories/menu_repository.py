from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from linkfolio.models.menu import MenuSection, MenuProduct


class MenuRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_sections(self, user_id: str, with_products: bool = False) -> List[MenuSection]:
        query = self.db.query(MenuSection).filter(MenuSection.user_id == user_id)
        if with_products:
            query = query.options(selectinload(MenuSection.products))
        return query.order_by(MenuSection.position.asc()).all()

    def get_section(self, section_id: str, user_id: str) -> Optional[MenuSection]:
        return (
            self.db.query(MenuSection)
            .filter(MenuSection.id == section_id, MenuSection.user_id == user_id)
            .first()
        )

    def list_products(self, user_id: str, section_id: Optional[str] = None) -> List[MenuProduct]:
        query = self.db.query(MenuProduct).filter(MenuProduct.user_id == user_id)
        if section_id:
            query = query.filter(MenuProduct.section_id == section_id)
        return query.order_by(MenuProduct.section_id.asc(), MenuProduct.position.asc()).all()

    def get_product(self, product_id: str, user_id: str) -> Optional[MenuProduct]:
        return (
            self.db.query(MenuProduct)
            .filter(MenuProduct.id == product_id, MenuProduct.user_id == user_id)
            .first()
        )

    def add(self, item):
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def save(self, item):
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete(self, item) -> None:
        self.db.delete(item)
        self.db.commit()
