# warehub/core/auth/policy.py
"""
Role-based access policy.

A user's roles are a set of tags. Protected operations declare the roles they
permit and succeed when the caller's set intersects it. Ownership checks
(this merchant owns this booking, this owner owns this warehouse) are separate
predicates layered on top of role membership.
"""
from typing import Iterable, Optional

from warehub.shared.enums import Role

# Highest precedence first
PRIMARY_ROLE_PRECEDENCE = [
    (Role.ADMIN, "admin"),
    (Role.WAREHOUSE_OWNER, "owner"),
    (Role.MERCHANT, "merchant"),
]
DEFAULT_PRIMARY_ROLE = "user"


def _role_values(roles: Optional[Iterable]) -> set:
    values = set()
    for role in roles or []:
        values.add(role.value if isinstance(role, Role) else str(role).upper())
    return values


def has_any_role(user_roles: Optional[Iterable], permitted: Iterable) -> bool:
    """True if the caller holds at least one of the permitted roles"""
    return bool(_role_values(user_roles) & _role_values(permitted))


def has_role(user_roles: Optional[Iterable], role: Role) -> bool:
    return role.value in _role_values(user_roles)


def is_admin(user) -> bool:
    return has_role(user.roles, Role.ADMIN)


def primary_role(roles: Optional[Iterable]) -> str:
    """Single display label for a role set: admin > owner > merchant > user"""
    values = _role_values(roles)
    for role, label in PRIMARY_ROLE_PRECEDENCE:
        if role.value in values:
            return label
    return DEFAULT_PRIMARY_ROLE


def normalize_roles(roles: Iterable) -> list:
    """Validate and de-duplicate role tags, keeping first-seen order"""
    result = []
    for raw in roles:
        if raw is None or str(raw).strip() == "":
            continue
        value = str(raw).strip().upper()
        if value not in Role.__members__:
            raise ValueError(f"Unknown role: {raw}")
        if value not in result:
            result.append(value)
    return result


# ==================== OWNERSHIP PREDICATES ====================

def owns_warehouse(user, warehouse) -> bool:
    return has_role(user.roles, Role.WAREHOUSE_OWNER) and user.id == warehouse.owner_id


def can_manage_warehouse(user, warehouse) -> bool:
    return is_admin(user) or owns_warehouse(user, warehouse)


def can_view_booking(user, booking) -> bool:
    if is_admin(user):
        return True
    if has_role(user.roles, Role.MERCHANT) and user.id == booking.merchant_id:
        return True
    return owns_warehouse(user, booking.warehouse)


def can_manage_booking(user, booking) -> bool:
    """Status transitions: warehouse owner or admin"""
    return is_admin(user) or owns_warehouse(user, booking.warehouse)


def can_message_booking(user, booking) -> bool:
    """Notes go from the warehouse owner to the merchant"""
    return owns_warehouse(user, booking.warehouse)


def can_access_merchant_scope(user, merchant_id: int) -> bool:
    return is_admin(user) or (has_role(user.roles, Role.MERCHANT) and user.id == merchant_id)


def can_access_owner_scope(user, owner_id: int) -> bool:
    return is_admin(user) or (has_role(user.roles, Role.WAREHOUSE_OWNER) and user.id == owner_id)
