"""Request-scoped authorization.

Every handler builds an :class:`AuthContext` from the logged-in account and
asks :func:`authorize` whether a (resource, action) pair is allowed. The rules
live in one table so the role matrix can be read in a single place.
"""

from dataclasses import dataclass

from errors import ForbiddenError, UnauthorizedError

ADMIN = "ADMIN"
EMPLOYEE = "EMPLOYEE"

STAFF_ROLES = (ADMIN, EMPLOYEE)


@dataclass(frozen=True)
class AuthContext:
    account_id: int
    role: str

    @classmethod
    def from_user(cls, user):
        if user is None or not getattr(user, "is_authenticated", False):
            raise UnauthorizedError()
        return cls(account_id=user.id, role=user.role)

    @property
    def is_admin(self):
        return self.role == ADMIN

    @property
    def is_staff(self):
        return self.role in STAFF_ROLES

    def owns(self, owner_id):
        return owner_id is not None and owner_id == self.account_id


def _admin(ctx, owner_id):
    return ctx.is_admin


def _staff(ctx, owner_id):
    return ctx.is_staff


def _owner(ctx, owner_id):
    return ctx.owns(owner_id)


def _owner_or_admin(ctx, owner_id):
    return ctx.is_admin or ctx.owns(owner_id)


def _owner_or_staff(ctx, owner_id):
    return ctx.is_staff or ctx.owns(owner_id)


def _staff_owner_or_admin(ctx, owner_id):
    return ctx.is_admin or (ctx.is_staff and ctx.owns(owner_id))


def _anyone(ctx, owner_id):
    return True


POLICIES = {
    ("booking", "create"): _anyone,
    ("booking", "view"): _owner_or_admin,
    ("booking", "update"): _owner_or_admin,
    ("booking", "delete"): _owner_or_admin,
    ("booking", "view_all"): _staff,

    ("excess", "create"): _owner,
    ("excess", "list"): _owner_or_staff,
    ("excess", "view"): _owner_or_admin,
    ("excess", "edit"): _owner_or_admin,
    ("excess", "manage_documents"): _owner,
    ("excess", "approve"): _admin,
    ("excess", "decline"): _admin,
    ("excess", "request_update"): _owner_or_admin,
    ("excess", "view_all"): _staff,

    ("finance", "view"): _owner_or_staff,

    ("bank_card", "list"): _staff,
    ("bank_card", "create"): _staff,
    ("bank_card", "create_for_other"): _admin,
    ("bank_card", "update"): _staff_owner_or_admin,
    ("bank_card", "delete"): _staff_owner_or_admin,
    ("bank_card", "deposit"): _owner_or_staff,
    ("bank_card", "withdraw"): _owner_or_staff,

    ("account", "manage"): _admin,
    ("account", "update"): _owner_or_admin,
    ("account", "change_role"): _admin,

    ("notification", "create"): _admin,
    ("notification", "read"): _owner,
}


def can(ctx, resource, action, owner_id=None):
    rule = POLICIES.get((resource, action))
    if rule is None:
        return False
    return rule(ctx, owner_id)


def authorize(ctx, resource, action, owner_id=None, message=None):
    """Raise :class:`ForbiddenError` unless ``ctx`` may perform the action."""
    if not can(ctx, resource, action, owner_id):
        raise ForbiddenError(message)
