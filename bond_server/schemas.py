"""
Wire types for bonds and the codec for the stored `bond_attrs` blob.

These models only decode shape and types; field constraints live in
bond_server.validation so that delete can check `id` alone.
"""
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, ValidationError

from bond_server.errors import StoreError


class BondAttrs(BaseModel):
    picture: str = ""
    description: str = ""
    rating: int | None = None


class Bond(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user_id: uuid.UUID | None = None
    title: str | None = None
    author: str | None = None
    bond_status: int | None = None
    bond_attrs: BondAttrs | None = None

    def to_json(self) -> dict:
        return self.model_dump(mode="json")


def encode_attrs(attrs: BondAttrs) -> bytes:
    """JSON-encode attrs for the blob column."""
    return attrs.model_dump_json().encode("utf-8")


def decode_attrs(blob) -> BondAttrs:
    """Decode a stored blob back into BondAttrs. Raises StoreError on anything undecodable."""
    if isinstance(blob, memoryview):
        blob = blob.tobytes()
    if not isinstance(blob, (bytes, bytearray)):
        raise StoreError(f"bond_attrs: expected bytes from store, got {type(blob).__name__}")
    try:
        return BondAttrs.model_validate_json(blob)
    except ValidationError as e:
        raise StoreError(f"bond_attrs: stored value could not be decoded ({e.error_count()} errors)") from e
