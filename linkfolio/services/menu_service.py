from typing import List

from fastapi import HTTPException, status

from linkfolio.models.menu import MenuSection, MenuProduct
from linkfolio.repositories.menu_repository import MenuRepository
from linkfolio.repositories.position_repository import PositionRepository
from linkfolio.services.plan_limits import UsageService


class MenuService:
    """Digital menu: ordered sections, each holding ordered products."""

    def __init__(self, repo: MenuRepository, usage: UsageService):
        self.repo = repo
        self.usage = usage
        self.section_positions = PositionRepository(repo.db, MenuSection)
        self.product_positions = PositionRepository(repo.db, MenuProduct)

    def ensure_enabled(self, user_id: str) -> None:
        if not self.usage.get_limits(user_id).menu_builder_enabled:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="The menu builder is not available on your plan. Upgrade your plan to use it.",
            )

    def _section(self, user_id: str, section_id: str) -> MenuSection:
        section = self.repo.get_section(section_id, user_id)
        if not section:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
        return section

    def _product(self, user_id: str, product_id: str) -> MenuProduct:
        product = self.repo.get_product(product_id, user_id)
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
        return product

    # Sections
    def list_sections(self, user_id: str, with_products: bool = False) -> List[MenuSection]:
        return self.repo.list_sections(user_id, with_products=with_products)

    def create_section(self, user_id: str, payload) -> MenuSection:
        self.ensure_enabled(user_id)
        section = MenuSection(
            user_id=user_id,
            name=payload.name,
            description=payload.description,
            position=self.section_positions.next_position(user_id=user_id),
        )
        return self.repo.add(section)

    def update_section(self, user_id: str, section_id: str, payload) -> MenuSection:
        section = self._section(user_id, section_id)
        if payload.name is not None:
            section.name = payload.name
        if payload.description is not None:
            section.description = payload.description
        return self.repo.save(section)

    def delete_section(self, user_id: str, section_id: str) -> None:
        self.repo.delete(self._section(user_id, section_id))

    def reorder_sections(self, user_id: str, ordered_ids: List[str]) -> List[MenuSection]:
        self.section_positions.reorder(ordered_ids, user_id=user_id)
        return self.repo.list_sections(user_id)

    # Products
    def list_products(self, user_id: str, section_id: str = None) -> List[MenuProduct]:
        return self.repo.list_products(user_id, section_id)

    def create_product(self, user_id: str, payload) -> MenuProduct:
        self.ensure_enabled(user_id)
        self._section(user_id, payload.section_id)
        product = MenuProduct(
            section_id=payload.section_id,
            user_id=user_id,
            name=payload.name,
            description=payload.description,
            price=payload.price,
            image_url=payload.image_url,
            is_available=payload.is_available,
            position=self.product_positions.next_position(section_id=payload.section_id),
        )
        return self.repo.add(product)

    def update_product(self, user_id: str, product_id: str, payload) -> MenuProduct:
        product = self._product(user_id, product_id)
        data = payload.model_dump(exclude_unset=True)
        new_section = data.pop("section_id", None)
        if new_section and new_section != product.section_id:
            self._section(user_id, new_section)
            product.section_id = new_section
            product.position = self.product_positions.next_position(section_id=new_section)
        for field, value in data.items():
            if value is not None:
                setattr(product, field, value)
        return self.repo.save(product)

    def delete_product(self, user_id: str, product_id: str) -> None:
        self.repo.delete(self._product(user_id, product_id))

    def reorder_products(self, user_id: str, section_id: str, ordered_ids: List[str]) -> List[MenuProduct]:
        self._section(user_id, section_id)
        self.product_positions.reorder(ordered_ids, section_id=section_id, user_id=user_id)
        return self.repo.list_products(user_id, section_id)
