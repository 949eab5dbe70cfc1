"""Role based access control for accounts.

Each `Role` grants a fixed set of `Permission`s; an account may additionally
hold individual permissions in its ``permissions`` list. A permission check
passes when either source grants it.
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable

from credo.domain.entities.account import Account, Role


class Permission(str, Enum):
    VIEW_PROFILE = "view_profile"
    EDIT_PROFILE = "edit_profile"
    DELETE_ACCOUNT = "delete_account"
    CREATE_POST = "create_post"
    EDIT_POST = "edit_post"
    DELETE_POST = "delete_post"
    VIEW_ALL_POSTS = "view_all_posts"
    MANAGE_USERS = "manage_users"
    MANAGE_CONTENT = "manage_content"
    VIEW_ANALYTICS = "view_analytics"
    MANAGE_SETTINGS = "manage_settings"


ROLE_PERMISSIONS: Dict[Role, FrozenSet[Permission]] = {
    Role.ADMIN: frozenset(Permission),
    Role.MODERATOR: frozenset(
        {
            Permission.VIEW_PROFILE,
            Permission.EDIT_PROFILE,
            Permission.CREATE_POST,
            Permission.EDIT_POST,
            Permission.DELETE_POST,
            Permission.VIEW_ALL_POSTS,
            Permission.MANAGE_CONTENT,
        }
    ),
    Role.USER: frozenset(
        {
            Permission.VIEW_PROFILE,
            Permission.EDIT_PROFILE,
            Permission.DELETE_ACCOUNT,
            Permission.CREATE_POST,
            Permission.EDIT_POST,
            Permission.DELETE_POST,
        }
    ),
    Role.GUEST: frozenset({Permission.VIEW_PROFILE}),
}


def permissions_for_role(role: Role | str | None) -> FrozenSet[Permission]:
    """Returns the permissions a role grants; unknown or missing roles grant nothing."""
    if role is None:
        return frozenset()
    try:
        return ROLE_PERMISSIONS[Role(role)]
    except ValueError:
        return frozenset()


def effective_permissions(account: Account) -> FrozenSet[str]:
    granted = {permission.value for permission in permissions_for_role(account.role)}
    granted.update(account.permissions or ())
    return frozenset(granted)


def has_permission(account: Account, permission: Permission | str) -> bool:
    """True when the account's role or its explicit permission list grants `permission`."""
    value = permission.value if isinstance(permission, Permission) else str(permission)
    return value in effective_permissions(account)


def has_role(account: Account, roles: Iterable[Role | str]) -> bool:
    if account.role is None:
        return False
    current = Role(account.role).value
    return any(Role(role).value == current for role in roles)
