"""Role checks and the action capability table.

Each gated action lists the roles allowed to perform it; roles do not
inherit from one another.
"""

from enum import Enum

from community_fees.models.community import STAFF_ROLES, Role, User


class Action(str, Enum):
    PAYMENT_SUBMIT = "payment.submit"
    PAYMENT_OVERRIDE = "payment.override"
    PAYMENT_DELETE = "payment.delete"
    FEE_CONFIG_EDIT = "fee_config.edit"
    REGISTRATION_SUBMIT = "registration.submit"
    REGISTRATION_REVIEW = "registration.review"
    REGISTRATION_REVIEW_STAFF = "registration.review_staff"
    RESIDENT_VIEW_ALL = "resident.view_all"
    REPORT_EXPORT = "report.export"
    USER_MANAGE = "user.manage"


CAPABILITIES: dict[Action, frozenset[Role]] = {
    Action.PAYMENT_SUBMIT: frozenset({Role.KEEP, Role.MGR, Role.ADMIN}),
    Action.PAYMENT_OVERRIDE: frozenset({Role.MGR, Role.ADMIN}),
    Action.PAYMENT_DELETE: frozenset({Role.MGR, Role.ADMIN}),
    Action.FEE_CONFIG_EDIT: frozenset({Role.MGR, Role.ADMIN}),
    Action.REGISTRATION_SUBMIT: frozenset({Role.EXT}),
    Action.REGISTRATION_REVIEW: frozenset({Role.KEEP, Role.MGR, Role.ADMIN}),
    Action.REGISTRATION_REVIEW_STAFF: frozenset({Role.MGR, Role.ADMIN}),
    Action.RESIDENT_VIEW_ALL: frozenset({Role.KEEP, Role.MGR, Role.ADMIN}),
    Action.REPORT_EXPORT: frozenset({Role.KEEP, Role.MGR, Role.ADMIN}),
    Action.USER_MANAGE: frozenset({Role.ADMIN}),
}


def has_permission(user: User | None, allowed_roles: set[Role] | frozenset[Role]) -> bool:
    """True iff ``user`` exists and has one of ``allowed_roles``."""
    if user is None:
        return False
    return user.role in allowed_roles


def authorize(user: User | None, action: Action | str) -> bool:
    """True iff ``user`` may perform ``action``."""
    return has_permission(user, CAPABILITIES[Action(action)])


def can_access_resident(user: User | None, resident_id: str) -> bool:
    """Staff see every resident; EXT users only their registered units."""
    if user is None:
        return False
    if user.role in STAFF_ROLES:
        return True
    if user.role == Role.EXT:
        return resident_id in user.registered_addresses
    return False
