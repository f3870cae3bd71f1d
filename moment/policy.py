"""Authorization policy.

Every route asks `authorize(principal, action, resource)`. Rules are pure
functions of the principal and the resource (or just the fields that
identify its owner) and live in one table, so the whole access model can be
read here.

Provider-flagged principals may read and update any booking and list the
bookings of any provider. Booking rules never compare the principal with
the booking's providerId.
"""

import logging
from enum import Enum
from typing import Any, Callable, Mapping, NamedTuple, Optional

from .auth import Principal
from .errors import Forbidden, Unauthenticated

logger = logging.getLogger(__name__)

Resource = Mapping[str, Any]


class Action(str, Enum):
    USER_READ = "user:read"
    USER_UPDATE = "user:update"
    USER_CHANGE_ROLE = "user:change_role"
    USER_DELETE = "user:delete"
    USER_LIST = "user:list"

    PROVIDER_READ = "provider:read"
    PROVIDER_CREATE = "provider:create"
    PROVIDER_UPDATE = "provider:update"
    PROVIDER_DELETE = "provider:delete"
    PROVIDER_SET_STATUS = "provider:set_status"
    PROVIDER_PUBLISH = "provider:publish"

    SERVICE_READ = "service:read"
    SERVICE_CREATE = "service:create"
    SERVICE_UPDATE = "service:update"
    SERVICE_DELETE = "service:delete"

    BOOKING_READ = "booking:read"
    BOOKING_CREATE = "booking:create"
    BOOKING_UPDATE = "booking:update"
    BOOKING_SET_STATUS = "booking:set_status"
    BOOKING_DELETE = "booking:delete"
    BOOKING_LIST_ALL = "booking:list_all"
    BOOKING_LIST_BY_USER = "booking:list_by_user"
    BOOKING_LIST_BY_PROVIDER = "booking:list_by_provider"
    BOOKING_BOOKED_DATES = "booking:booked_dates"

    UPLOAD_PUBLIC = "upload:public"
    UPLOAD = "upload:create"
    UPLOAD_DELETE = "upload:delete"

    CLAIMS_SET = "claims:set"


class Rule(NamedTuple):
    check: Callable[[Principal, Resource], bool]
    requires_principal: bool = True


def _always(p: Optional[Principal], r: Resource) -> bool:
    """Grant unconditionally; whether a principal is needed is Rule.requires_principal."""
    return True


def _admin(p: Principal, r: Resource) -> bool:
    return p.is_admin


def _self_or_admin(p: Principal, r: Resource) -> bool:
    # User documents are keyed by uid
    return r.get("id") == p.subject_id or p.is_admin


def _provider_owner(p: Principal, r: Resource) -> bool:
    return r.get("uid") == p.subject_id


def _provider_owner_or_admin(p: Principal, r: Resource) -> bool:
    return _provider_owner(p, r) or p.is_admin


def _service_owner(p: Principal, r: Resource) -> bool:
    # r is the Provider owning the service
    return p.is_admin or (p.is_provider and _provider_owner(p, r))


def _booking_party(p: Principal, r: Resource) -> bool:
    return r.get("userId") == p.subject_id or p.is_provider or p.is_admin


def _booking_owner_or_admin(p: Principal, r: Resource) -> bool:
    return r.get("userId") == p.subject_id or p.is_admin


def _provider_or_admin(p: Principal, r: Resource) -> bool:
    return p.is_provider or p.is_admin


def _upload_owner_or_admin(p: Principal, r: Resource) -> bool:
    return r.get("ownerId") == p.subject_id or p.is_admin


POLICY: dict[Action, Rule] = {
    Action.USER_READ: Rule(_self_or_admin),
    Action.USER_UPDATE: Rule(_self_or_admin),
    Action.USER_CHANGE_ROLE: Rule(_admin),
    Action.USER_DELETE: Rule(_admin),
    Action.USER_LIST: Rule(_admin),
    Action.PROVIDER_READ: Rule(_always, requires_principal=False),
    Action.PROVIDER_CREATE: Rule(_always),
    Action.PROVIDER_UPDATE: Rule(_provider_owner_or_admin),
    Action.PROVIDER_DELETE: Rule(_provider_owner_or_admin),
    Action.PROVIDER_SET_STATUS: Rule(_admin),
    Action.PROVIDER_PUBLISH: Rule(_provider_owner),
    Action.SERVICE_READ: Rule(_always, requires_principal=False),
    Action.SERVICE_CREATE: Rule(_service_owner),
    Action.SERVICE_UPDATE: Rule(_service_owner),
    Action.SERVICE_DELETE: Rule(_service_owner),
    Action.BOOKING_READ: Rule(_booking_party),
    Action.BOOKING_CREATE: Rule(_always),
    Action.BOOKING_UPDATE: Rule(_booking_party),
    Action.BOOKING_SET_STATUS: Rule(_booking_party),
    Action.BOOKING_DELETE: Rule(_booking_owner_or_admin),
    Action.BOOKING_LIST_ALL: Rule(_admin),
    Action.BOOKING_LIST_BY_USER: Rule(_booking_owner_or_admin),
    Action.BOOKING_LIST_BY_PROVIDER: Rule(_provider_or_admin),
    Action.BOOKING_BOOKED_DATES: Rule(_always),
    Action.UPLOAD_PUBLIC: Rule(_always, requires_principal=False),
    Action.UPLOAD: Rule(_always),
    Action.UPLOAD_DELETE: Rule(_upload_owner_or_admin),
    Action.CLAIMS_SET: Rule(_admin),
}


def is_allowed(principal: Optional[Principal], action: Action, resource: Optional[Resource] = None) -> bool:
    rule = POLICY[action]
    if principal is None:
        return not rule.requires_principal
    return rule.check(principal, resource or {})


def authorize(principal: Optional[Principal], action: Action, resource: Optional[Resource] = None) -> None:
    """Raise Unauthenticated or Forbidden unless the action is permitted."""
    rule = POLICY[action]
    if principal is None and rule.requires_principal:
        raise Unauthenticated("Unauthorized")
    if not is_allowed(principal, action, resource):
        logger.warning(
            f"🚫 Access denied: {principal.subject_id if principal else 'anonymous'} "
            f"attempted {action.value} on {(resource or {}).get('id', '-')}"
        )
        raise Forbidden("Forbidden")
