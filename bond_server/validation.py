"""
Field validation for bonds.

`validate(bond)` checks every rule; `validate(bond, fields=("id",))` reports
only violations rooted at the whitelisted fields (delete only needs a usable id).
"""
import uuid
from collections.abc import Iterable

from pydantic import BaseModel, Field, ValidationError

from bond_server.config import MAX_TEXT_LENGTH
from bond_server.schemas import Bond


class _AttrsRules(BaseModel):
    picture: str = ""
    description: str = ""
    rating: int = Field(ge=1, le=10)


class _BondRules(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str = Field(min_length=1, max_length=MAX_TEXT_LENGTH)
    author: str = Field(min_length=1, max_length=MAX_TEXT_LENGTH)
    bond_status: int = Field(ge=0, le=9)
    bond_attrs: _AttrsRules


def validate(bond: Bond, fields: Iterable[str] | None = None) -> dict[str, str]:
    """Return {field: message} for each violation; empty dict when the bond is valid."""
    allowed = set(fields) if fields is not None else None
    try:
        _BondRules.model_validate(bond.model_dump(exclude_none=True))
    except ValidationError as e:
        violations = {}
        for err in e.errors():
            loc = err["loc"]
            if allowed is not None and (not loc or loc[0] not in allowed):
                continue
            violations[".".join(str(part) for part in loc)] = err["msg"]
        return violations
    return {}
