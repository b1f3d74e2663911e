import logging
from typing import Iterable, List

from sqlalchemy import func
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class PositionRepository:
    """
    Keeps the zero-based display order of sibling rows.

    A sibling set is every row of ``model`` matching the given column filters,
    e.g. ``user_id=...`` for links or ``page_id=...`` for blocks. New rows are
    appended at ``max + 1`` and may leave gaps; ``reorder`` always writes a dense
    ``0..n-1`` assignment.
    """

    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    def _filters(self, scope: dict) -> list:
        return [getattr(self.model, column) == value for column, value in scope.items()]

    def next_position(self, **parent) -> int:
        current_max = (
            self.db.query(func.max(self.model.position))
            .filter(*self._filters(parent))
            .scalar()
        )
        return (current_max if current_max is not None else -1) + 1

    def owned_ids(self, **owner_scope) -> List[str]:
        rows = self.db.query(self.model.id).filter(*self._filters(owner_scope)).all()
        return [row[0] for row in rows]

    def reorder(self, ordered_ids: Iterable[str], **owner_scope) -> bool:
        """
        Write ``position = index`` for every id, all in one transaction.

        The ids must be exactly the owner's sibling set. Anything else (a foreign
        id, a missing id, a duplicate) leaves every row untouched and returns
        False, without telling the caller which ids exist.
        """
        ids = list(ordered_ids)
        owned = set(self.owned_ids(**owner_scope))
        if len(ids) != len(set(ids)) or set(ids) != owned:
            logger.info(
                f"Reorder of {self.model.__tablename__} ignored: id set does not match owner scope {owner_scope}"
            )
            return False

        try:
            for index, row_id in enumerate(ids):
                (
                    self.db.query(self.model)
                    .filter(self.model.id == row_id)
                    .update({self.model.position: index}, synchronize_session="fetch")
                )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Reorder of {self.model.__tablename__} rolled back: {str(e)}")
            raise
        return True
