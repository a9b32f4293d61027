# backend/utils/gateway.py
import logging
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import Base
from utils.errors import UpstreamError

logger = logging.getLogger(__name__)


def _store_message(e: SQLAlchemyError) -> str:
    # DBAPI errors carry the database's own text in .orig
    orig = getattr(e, "orig", None)
    return str(orig) if orig is not None else str(e)


class TableGateway:
    """
    Row access for one table, one statement per call.

    Every mutating call commits on its own. Callers that chain several
    calls get no transaction across them, which is what the cascade
    coordinator is written against.
    """

    def __init__(self, db: Session, model: Type[Base]):
        self.db = db
        self.model = model
        self.table = model.__tablename__

    def _column(self, name: str):
        col = getattr(self.model, name, None)
        if col is None:
            raise ValueError(f"{self.table} has no column {name!r}")
        return col

    def _where(self, stmt, filters: Dict[str, Any]):
        for name, value in filters.items():
            stmt = stmt.where(self._column(name) == value)
        return stmt

    def _fail(self, action: str, e: SQLAlchemyError):
        self.db.rollback()
        message = _store_message(e)
        logger.error("%s on %s failed: %s", action, self.table, message)
        raise UpstreamError(f"Error {action} {self.table}: {message}") from e

    # ---- reads ----
    def select(self, ilike: Optional[Dict[str, str]] = None, **filters) -> List[Base]:
        """Rows matching all equality filters and, optionally, ILIKE %term% filters."""
        stmt = self._where(select(self.model), filters)
        for name, term in (ilike or {}).items():
            stmt = stmt.where(self._column(name).ilike(f"%{term}%"))
        stmt = stmt.order_by(self.model.id)
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            self._fail("fetching", e)

    def select_one(self, **filters) -> Optional[Base]:
        rows = self.select(**filters)
        return rows[0] if rows else None

    # ---- writes ----
    def insert(self, values: Dict[str, Any]) -> Base:
        row = self.model(**values)
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self._fail("inserting into", e)
        logger.info("Inserted %s id=%s", self.table, row.id)
        return row

    def update(self, values: Dict[str, Any], **filters) -> List[Base]:
        stmt = self._where(update(self.model), filters).values(**values)
        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("updating", e)
        return self.select(**filters)

    def delete(self, **filters) -> int:
        stmt = self._where(delete(self.model), filters)
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("deleting from", e)
        logger.info("Deleted %s row(s) from %s where %s", result.rowcount, self.table, filters)
        return result.rowcount
