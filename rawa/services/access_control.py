"""Access control: route-level role gates and the fine-grained user-management policy.

Every permission decision about users goes through `decide`; routers never
re-derive role lists on their own.
"""

from typing import Literal

from rawa.core.exceptions import Forbidden, Unauthenticated
from rawa.schemas.auth import CurrentUser
from rawa.schemas.user import USER_ROLES

UserAction = Literal[
    "view_user",
    "edit_user",
    "change_role",
    "change_status",
    "set_password",
    "change_password",
    "delete_user",
    "create_user",
]

# "restricted" only applies to view_user: the caller gets the public projection.
Decision = Literal["allow", "deny", "restricted"]

# Route gates shared by several routers.
STAFF_ROLES: frozenset[str] = frozenset({"SUPER_ADMIN", "ADMIN", "DATA_ENTRY"})
SUPER_ADMIN_ONLY: frozenset[str] = frozenset({"SUPER_ADMIN"})

FULL_VIEW_ROLES: frozenset[str] = frozenset({"SUPER_ADMIN", "ADMIN", "DATA_ENTRY", "FACTORY_OWNER"})
EDIT_OTHERS_ROLES: frozenset[str] = STAFF_ROLES
DELETE_OTHERS_ROLES: frozenset[str] = STAFF_ROLES
ROLE_ADMIN_ROLES: frozenset[str] = frozenset({"SUPER_ADMIN", "ADMIN"})

# Roles each actor may hand out when creating a user. Missing actor role = may not create.
CREATABLE_ROLES: dict[str, frozenset[str]] = {
    "SUPER_ADMIN": frozenset(USER_ROLES),
    "ADMIN": frozenset(USER_ROLES) - {"SUPER_ADMIN"},
    "DATA_ENTRY": frozenset({"ADMIN", "DATA_ENTRY", "USER"}),
}

DENIAL_MESSAGES: dict[UserAction, str] = {
    "view_user": "You are not allowed to view this account",
    "edit_user": "You are not allowed to edit this account",
    "change_role": "You are not allowed to assign this role",
    "change_status": "You are not allowed to change this account's status",
    "set_password": "You are not allowed to change this password",
    "change_password": "You are not allowed to change this password",
    "delete_user": "You are not allowed to delete this account",
    "create_user": "You are not allowed to create this type of user",
}


def check_route_access(user: CurrentUser | None, allowed_roles: frozenset[str]) -> CurrentUser:
    """Route gate: Unauthenticated if there is no identity, Forbidden if the role is not allowed."""
    if user is None:
        raise Unauthenticated()
    if user.role not in allowed_roles:
        raise Forbidden("You do not have permission to use this service")
    return user


def _administers_account(actor_role: str, target_role: str | None) -> bool:
    if actor_role not in ROLE_ADMIN_ROLES:
        return False
    return not (actor_role == "ADMIN" and target_role == "SUPER_ADMIN")


def decide(
    actor_role: str,
    actor_id: int,
    action: UserAction,
    target_id: int | None = None,
    target_role: str | None = None,
    requested_role: str | None = None,
) -> Decision:
    """
    Decide whether actor may perform action on the target user.

    target_role is the target's current role; requested_role is the role being
    assigned (change_role) or created (create_user).
    """
    is_self = target_id is not None and actor_id == target_id

    if action == "view_user":
        if is_self or actor_role in FULL_VIEW_ROLES:
            return "allow"
        return "restricted"

    if action == "edit_user":
        return "allow" if is_self or actor_role in EDIT_OTHERS_ROLES else "deny"

    if action == "change_role":
        if actor_role not in ROLE_ADMIN_ROLES:
            return "deny"
        if actor_role == "ADMIN" and requested_role == "SUPER_ADMIN":
            return "deny"
        return "allow"

    if action == "change_status":
        return "allow" if _administers_account(actor_role, target_role) else "deny"

    if action == "set_password":
        return "allow" if _administers_account(actor_role, target_role) else "deny"

    if action == "change_password":
        # Self-service is always permitted here; the caller still has to prove the old password.
        if is_self:
            return "allow"
        return "allow" if _administers_account(actor_role, target_role) else "deny"

    if action == "delete_user":
        if not (is_self or actor_role in DELETE_OTHERS_ROLES):
            return "deny"
        if actor_role == "ADMIN" and target_role == "SUPER_ADMIN":
            return "deny"
        return "allow"

    if action == "create_user":
        creatable = CREATABLE_ROLES.get(actor_role)
        if creatable is None:
            return "deny"
        return "allow" if (requested_role or "USER") in creatable else "deny"

    return "deny"


def authorize(
    actor: CurrentUser,
    action: UserAction,
    target_id: int | None = None,
    target_role: str | None = None,
    requested_role: str | None = None,
) -> Decision:
    """Like decide, but raises Forbidden on deny. Returns "allow" or "restricted"."""
    decision = decide(
        actor.role,
        actor.id,
        action,
        target_id=target_id,
        target_role=target_role,
        requested_role=requested_role,
    )
    if decision == "deny":
        raise Forbidden(DENIAL_MESSAGES[action])
    return decision
