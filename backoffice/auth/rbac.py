"""Role-based capability predicates.

Roles are the closed ``ActorRole`` enum; every decision goes through one of
the predicates below, which read the capability table.
"""

from __future__ import annotations

from backoffice.models.enums import ActorRole

CAN_REGISTER_PAYMENT = "payments.register"
CAN_EXTEND_QUOTE = "quotes.extend"
CAN_ADD_ATTACHMENT = "quotes.attachments.add"
CAN_COMMENT_QUOTE = "quotes.comment"
CAN_CONVERT_QUOTE = "quotes.convert"
CAN_MANAGE_ORDERS = "orders.manage"
CAN_MANAGE_CATALOG = "options.catalog.manage"
CAN_ADD_ORDER_OPTIONS = "orders.options.add"

ROLE_CAPABILITIES: dict[ActorRole, frozenset[str]] = {
    ActorRole.CLIENT_ADMIN: frozenset({CAN_COMMENT_QUOTE, CAN_CONVERT_QUOTE, CAN_ADD_ORDER_OPTIONS}),
    ActorRole.BUYER: frozenset({CAN_COMMENT_QUOTE, CAN_CONVERT_QUOTE, CAN_ADD_ORDER_OPTIONS}),
    ActorRole.READER: frozenset({CAN_COMMENT_QUOTE}),
    ActorRole.SALES_INTERNAL: frozenset(
        {
            CAN_REGISTER_PAYMENT,
            CAN_EXTEND_QUOTE,
            CAN_ADD_ATTACHMENT,
            CAN_COMMENT_QUOTE,
            CAN_MANAGE_ORDERS,
            CAN_ADD_ORDER_OPTIONS,
        }
    ),
    ActorRole.TECH_INTERNAL: frozenset(
        {
            CAN_REGISTER_PAYMENT,
            CAN_ADD_ATTACHMENT,
            CAN_COMMENT_QUOTE,
            CAN_MANAGE_ORDERS,
            CAN_ADD_ORDER_OPTIONS,
        }
    ),
    ActorRole.ADMIN: frozenset(
        {
            CAN_REGISTER_PAYMENT,
            CAN_COMMENT_QUOTE,
            CAN_MANAGE_ORDERS,
            CAN_ADD_ORDER_OPTIONS,
            CAN_MANAGE_CATALOG,
        }
    ),
}

INTERNAL_ROLES = frozenset({ActorRole.SALES_INTERNAL, ActorRole.TECH_INTERNAL, ActorRole.ADMIN})


def parse_role(value: str | ActorRole) -> ActorRole:
    """Map an external role string onto the closed enum; unknown roles are customer readers."""
    if isinstance(value, ActorRole):
        return value
    normalized = str(value).strip().upper()
    for role in ActorRole:
        if normalized in {role.value, role.name}:
            return role
    return ActorRole.READER


def has_capability(role: ActorRole, capability: str) -> bool:
    return capability in ROLE_CAPABILITIES[role]


def is_internal_role(role: ActorRole) -> bool:
    return role in INTERNAL_ROLES


def can_register_payment(role: ActorRole) -> bool:
    return has_capability(role, CAN_REGISTER_PAYMENT)


def can_extend_quote(role: ActorRole) -> bool:
    return has_capability(role, CAN_EXTEND_QUOTE)


def can_add_attachment(role: ActorRole) -> bool:
    return has_capability(role, CAN_ADD_ATTACHMENT)


def can_comment_quote(role: ActorRole) -> bool:
    return has_capability(role, CAN_COMMENT_QUOTE)


def can_convert_quote(role: ActorRole) -> bool:
    return has_capability(role, CAN_CONVERT_QUOTE)


def can_manage_orders(role: ActorRole) -> bool:
    return has_capability(role, CAN_MANAGE_ORDERS)


def can_manage_catalog(role: ActorRole) -> bool:
    return has_capability(role, CAN_MANAGE_CATALOG)


def can_add_order_options(role: ActorRole) -> bool:
    return has_capability(role, CAN_ADD_ORDER_OPTIONS)
