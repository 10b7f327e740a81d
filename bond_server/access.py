"""
Access decisions for bond operations.

`check` is pure: expiry is always decided before the credential lookup, and
an expired token is refused no matter which credentials it carries.
"""
import enum
import uuid
from dataclasses import dataclass, field


class Credential(str, enum.Enum):
    BOND_CREATE = "bond:create"
    BOND_UPDATE = "bond:update"
    BOND_DELETE = "bond:delete"


class Decision(enum.Enum):
    ALLOW = "allow"
    EXPIRED = "expired"
    DENIED = "denied"


@dataclass(frozen=True)
class Claims:
    """Caller identity decoded from one request's access token. Never stored."""

    user_id: uuid.UUID
    expires_at: int
    credentials: dict[Credential, bool] = field(default_factory=dict)

    def has(self, credential: Credential) -> bool:
        # Absent means false
        return self.credentials.get(credential, False) is True


def parse_credentials(raw: dict | None, scope: str | list | None = None) -> dict[Credential, bool]:
    """
    Build the credential map from a `credentials` object and/or a scope claim.
    Names outside Credential are dropped; a name listed in scope counts as true.
    """
    known = {c.value: c for c in Credential}
    result: dict[Credential, bool] = {}
    for name, granted in (raw or {}).items():
        if name in known:
            result[known[name]] = granted is True
    if isinstance(scope, str):
        scope = scope.split()
    for name in scope or ():
        if name in known:
            result[known[name]] = True
    return result


def check(claims: Claims, required: Credential, now: int) -> Decision:
    if now > claims.expires_at:
        return Decision.EXPIRED
    if not claims.has(required):
        return Decision.DENIED
    return Decision.ALLOW
