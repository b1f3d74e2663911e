from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from linkfolio.models.page import Page, Block


class PageRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_user(self, user_id: str, with_blocks: bool = False, only_published: bool = False) -> List[Page]:
        query = self.db.query(Page).filter(Page.user_id == user_id)
        if with_blocks:
            query = query.options(selectinload(Page.blocks))
        if only_published:
            query = query.filter(Page.is_published.is_(True))
        return query.order_by(Page.position.asc()).all()

    def get_by_id(self, page_id: str, user_id: str) -> Optional[Page]:
        return (
            self.db.query(Page)
            .filter(Page.id == page_id, Page.user_id == user_id)
            .first()
        )

    def get_by_slug(self, user_id: str, slug: str) -> Optional[Page]:
        return (
            self.db.query(Page)
            .filter(Page.user_id == user_id, Page.slug == slug)
            .first()
        )

    def create(self, page: Page) -> Page:
        self.db.add(page)
        self.db.commit()
        self.db.refresh(page)
        return page

    def update(self, page: Page) -> Page:
        self.db.commit()
        self.db.refresh(page)
        return page

    def delete(self, page: Page) -> None:
        self.db.delete(page)
        self.db.commit()


class BlockRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_page(self, page_id: str, user_id: str) -> List[Block]:
        return (
            self.db.query(Block)
            .filter(Block.page_id == page_id, Block.user_id == user_id)
            .order_by(Block.position.asc())
            .all()
        )

    def get_by_id(self, block_id: str, user_id: str) -> Optional[Block]:
        return (
            self.db.query(Block)
            .filter(Block.id == block_id, Block.user_id == user_id)
            .first()
        )

    def create(self, block: Block) -> Block:
        self.db.add(block)
        self.db.commit()
        self.db.refresh(block)
        return block

    def update(self, block: Block) -> Block:
        self.db.commit()
        self.db.refresh(block)
        return block

    def delete(self, block: Block) -> None:
        self.db.delete(block)
        self.db.commit()
