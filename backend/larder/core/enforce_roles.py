"""Role Hierarchy — total order over roles and the capability predicates built on it.

Invariants:
    - ROLE_ORDER is the single source of truth for rank: STAFF(0) < MANAGER(1) < ADMIN(2)
    - All functions are PURE and total: every Role has a rank, no failure mode
"""

from larder.core.domain_types import Role


ROLE_ORDER: tuple[Role, ...] = (Role.STAFF, Role.MANAGER, Role.ADMIN)


def role_rank(role: Role) -> int:
    return ROLE_ORDER.index(Role(role))


def is_at_least(role: Role, required: Role) -> bool:
    """True iff role's rank >= required's rank."""
    return role_rank(role) >= role_rank(required)


def can_manage_inventory(role: Role) -> bool:
    return is_at_least(role, Role.MANAGER)


def can_delete_inventory(role: Role) -> bool:
    return is_at_least(role, Role.MANAGER)


def can_manage_users(role: Role) -> bool:
    return Role(role) == Role.ADMIN
