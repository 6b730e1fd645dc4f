from __future__ import annotations
from dataclasses import dataclass
from flask_jwt_extended import get_jwt, get_jwt_identity

from tableside.constants.roles import Role
from tableside.errors import Forbidden


@dataclass(frozen=True)
class Actor:
    """Authenticated staff member as asserted by the access token."""
    id: str
    role: Role
    vendor_id: str
    is_approved: bool = True

    @property
    def is_owner(self) -> bool:
        return self.role is Role.VENDOR


def actor_from_claims(identity, claims: dict) -> Actor:
    role = Role.parse(claims.get('role'))
    if role is None:
        raise Forbidden(f"Unknown role {claims.get('role')!r}.")
    vendor_id = claims.get('vendor_id')
    if not vendor_id:
        raise Forbidden('Account is not linked to a shop.')
    if not claims.get('is_approved', False):
        raise Forbidden('Account is awaiting approval.')
    return Actor(id=str(identity), role=role, vendor_id=str(vendor_id), is_approved=True)


def current_actor() -> Actor:
    return actor_from_claims(get_jwt_identity(), get_jwt())


def claims_for(role: Role, vendor_id: str, is_approved: bool = True) -> dict:
    """Additional JWT claims the auth service embeds; mirrors ``actor_from_claims``."""
    return {'role': role.value, 'vendor_id': vendor_id, 'is_approved': is_approved}


__all__ = ['Actor', 'actor_from_claims', 'current_actor', 'claims_for']
