"""
Persistence for bonds against a relational backend.

BondStore is built once at startup and shared by every request; each call opens
its own short-lived session on the shared engine. Nothing here locks or spans a
transaction across calls: the controller's read-then-write on update/delete is
two independent round trips, and concurrent writers to one id are last-write-wins.
"""
import logging
import uuid

from sqlalchemy import Engine, delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from bond_server.database import build_engine, build_sessionmaker, init_db
from bond_server.errors import NotFoundError, StoreError
from bond_server.models import BondRow
from bond_server.schemas import Bond, decode_attrs, encode_attrs

logger = logging.getLogger(__name__)


def _to_bond(row: BondRow) -> Bond:
    return Bond(
        id=row.id,
        created_at=row.created_at,
        updated_at=row.updated_at,
        user_id=row.user_id,
        title=row.title,
        author=row.author,
        bond_status=row.bond_status,
        bond_attrs=decode_attrs(row.bond_attrs),
    )


class BondStore:
    def __init__(self, engine: Engine):
        self.engine = engine
        self._sessions = build_sessionmaker(engine)

    @classmethod
    def from_url(cls, url: str) -> "BondStore":
        """Build the engine for url, create the table if needed, and wrap it."""
        engine = build_engine(url)
        init_db(engine)
        return cls(engine)

    def close(self) -> None:
        self.engine.dispose()

    def get_all(self) -> list[Bond]:
        """Every bond, in whatever order the backend returns them."""
        try:
            with self._sessions() as db:
                rows = db.scalars(select(BondRow)).all()
        except SQLAlchemyError as e:
            logger.exception("Could not list bonds")
            raise StoreError(f"could not list bonds: {e}") from e
        return [_to_bond(r) for r in rows]

    def get_by_id(self, bond_id: uuid.UUID) -> Bond:
        try:
            with self._sessions() as db:
                row = db.get(BondRow, bond_id)
        except SQLAlchemyError as e:
            logger.exception("Could not load bond %s", bond_id)
            raise StoreError(f"could not load bond {bond_id}: {e}") from e
        if row is None:
            raise NotFoundError("bond with the given ID is not found")
        return _to_bond(row)

    def get_by_author(self, author: str) -> Bond:
        """First bond whose author matches exactly."""
        try:
            with self._sessions() as db:
                row = db.scalars(select(BondRow).where(BondRow.author == author).limit(1)).first()
        except SQLAlchemyError as e:
            logger.exception("Could not load bond by author")
            raise StoreError(f"could not load bond by author: {e}") from e
        if row is None:
            raise NotFoundError("bond with the given author is not found")
        return _to_bond(row)

    def create(self, bond: Bond) -> None:
        """Insert bond with its pre-assigned id. A duplicate id is a StoreError."""
        row = BondRow(
            id=bond.id,
            created_at=bond.created_at,
            updated_at=bond.updated_at,
            user_id=bond.user_id,
            title=bond.title,
            author=bond.author,
            bond_status=bond.bond_status,
            bond_attrs=encode_attrs(bond.bond_attrs),
        )
        try:
            with self._sessions() as db:
                db.add(row)
                db.commit()
        except SQLAlchemyError as e:
            logger.exception("Could not create bond %s", bond.id)
            raise StoreError(f"could not create bond {bond.id}: {e}") from e

    def update(self, bond_id: uuid.UUID, bond: Bond) -> None:
        """Overwrite the mutable columns. Zero matching rows is not an error."""
        stmt = (
            update(BondRow)
            .where(BondRow.id == bond_id)
            .values(
                updated_at=bond.updated_at,
                title=bond.title,
                author=bond.author,
                bond_status=bond.bond_status,
                bond_attrs=encode_attrs(bond.bond_attrs),
            )
        )
        try:
            with self._sessions() as db:
                result = db.execute(stmt)
                db.commit()
        except SQLAlchemyError as e:
            logger.exception("Could not update bond %s", bond_id)
            raise StoreError(f"could not update bond {bond_id}: {e}") from e
        if result.rowcount == 0:
            logger.debug("Update matched no rows for bond %s", bond_id)

    def delete(self, bond_id: uuid.UUID) -> None:
        """Delete by id. Zero matching rows is not an error."""
        try:
            with self._sessions() as db:
                result = db.execute(delete(BondRow).where(BondRow.id == bond_id))
                db.commit()
        except SQLAlchemyError as e:
            logger.exception("Could not delete bond %s", bond_id)
            raise StoreError(f"could not delete bond {bond_id}: {e}") from e
        if result.rowcount == 0:
            logger.debug("Delete matched no rows for bond %s", bond_id)
