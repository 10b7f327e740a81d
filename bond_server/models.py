"""
SQLAlchemy models for the bond server: one row per bond in the `bonds` table.
"""
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, LargeBinary, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from bond_server.config import MAX_TEXT_LENGTH


class Base(DeclarativeBase):
    pass


class BondRow(Base):
    __tablename__ = "bonds"

    # Assigned by the server before the insert; never regenerated
    id: Mapped[uuid.UUID] = mapped_column(primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    user_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(MAX_TEXT_LENGTH), nullable=False)
    author: Mapped[str] = mapped_column(String(MAX_TEXT_LENGTH), nullable=False, index=True)
    bond_status: Mapped[int] = mapped_column(Integer, nullable=False)
    # JSON-encoded BondAttrs; see schemas.encode_attrs / decode_attrs
    bond_attrs: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
