"""
Bond operations end to end: access gate, body decoding, server-side defaults,
validation, ownership, and the store call.

Mutating operations always run in this order: token expiry, credential,
body, (update/delete) lookup and ownership, validation, write. Every failure
raises a BondError and ends the request; nothing is retried.
"""
import logging
import time
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from pydantic import ValidationError

from bond_server.access import Claims, Credential, Decision, check
from bond_server.config import STATUS_ACTIVE
from bond_server.errors import (
    BondValidationError,
    MalformedIdError,
    MalformedRequestError,
    NotFoundError,
    PermissionDeniedError,
    TokenExpiredError,
    envelope,
)
from bond_server.schemas import Bond
from bond_server.store import BondStore
from bond_server.validation import validate

logger = logging.getLogger(__name__)


def _parse_body(body: bytes) -> Bond:
    try:
        return Bond.model_validate_json(body or b"")
    except ValidationError as e:
        raise MalformedRequestError(
            "; ".join(f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in e.errors())
        )


class BondController:
    def __init__(self, store: BondStore, clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self.clock(), timezone.utc)

    def _authorize(self, claims: Claims, credential: Credential) -> None:
        decision = check(claims, credential, int(self.clock()))
        if decision is Decision.EXPIRED:
            logger.warning("Expired token from user %s for %s", claims.user_id, credential.value)
            raise TokenExpiredError("unauthorized, check expiration time of your token")
        if decision is Decision.DENIED:
            logger.warning("User %s lacks credential %s", claims.user_id, credential.value)
            raise PermissionDeniedError("permission denied, check credentials of your token")

    def _load_owned(self, claims: Claims, bond_id: uuid.UUID | None) -> Bond:
        """Existing bond by id, only if claims.user_id created it."""
        if bond_id is None:
            raise NotFoundError("bond with this ID not found")
        try:
            existing = self.store.get_by_id(bond_id)
        except NotFoundError:
            raise NotFoundError("bond with this ID not found") from None
        if existing.user_id != claims.user_id:
            logger.warning("User %s is not the creator of bond %s", claims.user_id, bond_id)
            raise PermissionDeniedError("permission denied, only the creator can modify this bond")
        return existing

    def list_bonds(self) -> dict:
        bonds = self.store.get_all()
        if not bonds:
            # An empty table is reported as not found
            raise NotFoundError("bonds were not found", count=0, bonds=None)
        return envelope(count=len(bonds), bonds=[b.to_json() for b in bonds])

    def get_bond(self, raw_id: str) -> dict:
        try:
            bond_id = uuid.UUID(raw_id)
        except ValueError as e:
            raise MalformedIdError(f"invalid UUID: {e}")
        try:
            bond = self.store.get_by_id(bond_id)
        except NotFoundError as e:
            raise NotFoundError(e.msg, bond=None) from None
        return envelope(bond=bond.to_json())

    def create_bond(self, claims: Claims, body: bytes) -> dict:
        self._authorize(claims, Credential.BOND_CREATE)
        bond = _parse_body(body)

        # Server-owned fields; whatever the client sent for these is discarded
        bond.id = uuid.uuid4()
        bond.created_at = self._now()
        bond.updated_at = None
        bond.user_id = claims.user_id
        bond.bond_status = STATUS_ACTIVE

        violations = validate(bond)
        if violations:
            raise BondValidationError(violations)
        self.store.create(bond)
        logger.info("Created bond %s for user %s", bond.id, claims.user_id)
        return envelope(bond=bond.to_json())

    def update_bond(self, claims: Claims, body: bytes) -> dict:
        self._authorize(claims, Credential.BOND_UPDATE)
        bond = _parse_body(body)
        existing = self._load_owned(claims, bond.id)

        bond.updated_at = self._now()
        # Owner and creation time are immutable; store.update never writes them
        bond.user_id = existing.user_id
        bond.created_at = existing.created_at

        violations = validate(bond)
        if violations:
            raise BondValidationError(violations)
        self.store.update(existing.id, bond)
        logger.info("Updated bond %s for user %s", existing.id, claims.user_id)
        return envelope()

    def delete_bond(self, claims: Claims, body: bytes) -> None:
        self._authorize(claims, Credential.BOND_DELETE)
        bond = _parse_body(body)

        # Only the id matters here; other fields in the body are not checked
        violations = validate(bond, fields=("id",))
        if violations:
            raise BondValidationError(violations)
        existing = self._load_owned(claims, bond.id)
        self.store.delete(existing.id)
        logger.info("Deleted bond %s for user %s", existing.id, claims.user_id)
