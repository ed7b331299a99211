"""권한 결정 엔진 — (행위자, 행위, 리소스) → 허용/거부.

Authorization engine — (actor, action, resource) → allow / deny.

Every role and ownership rule of the API lives in decide(). Services gather
the resource context (owner ids, existing-rating flag, owned-store count)
and call enforce(); routers never compare roles themselves.

decide() is pure: no I/O, no ORM objects, only ids and roles.

Decision table (first match wins):
    register                        → anyone (role coerced by resolve_registration_role)
    view stores / store / ratings   → anyone, unauthenticated included
    no actor                        → NOT_AUTHENTICATED
    me / password / own ratings     → any authenticated actor
    create store                    → store_owner, admin
    assign store owner              → admin
    update/delete store, store stats→ store owner, admin
    view owned stores               → store_owner
    create rating                   → normal_user, CONFLICT if already rated
    update/delete rating            → rating author, admin
    user management, all stats      → admin
    delete user                     → admin, CONFLICT while user owns stores
"""

import enum
from dataclasses import dataclass
from uuid import UUID

from app.models.user import User, UserRole
from app.utils.exceptions import DuplicateError, ForbiddenError, UnauthorizedError


class Action(str, enum.Enum):
    """권한 검사 대상 행위 (Actions subject to authorization)."""

    # 인증 — Auth
    REGISTER = "register"
    VIEW_ME = "view_me"
    CHANGE_OWN_PASSWORD = "change_own_password"

    # 매장 — Stores
    VIEW_STORES = "view_stores"
    VIEW_STORE = "view_store"
    CREATE_STORE = "create_store"
    ASSIGN_STORE_OWNER = "assign_store_owner"
    UPDATE_STORE = "update_store"
    DELETE_STORE = "delete_store"
    VIEW_OWNED_STORES = "view_owned_stores"
    VIEW_STORE_STATS = "view_store_stats"

    # 평점 — Ratings
    VIEW_STORE_RATINGS = "view_store_ratings"
    CREATE_RATING = "create_rating"
    UPDATE_RATING = "update_rating"
    DELETE_RATING = "delete_rating"
    VIEW_ALL_RATINGS = "view_all_ratings"
    VIEW_OWN_RATINGS = "view_own_ratings"

    # 사용자 관리 — User management
    LIST_USERS = "list_users"
    GET_USER = "get_user"
    CREATE_USER = "create_user"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"

    # 집계 — Aggregate statistics
    VIEW_USER_SUMMARY = "view_user_summary"
    VIEW_STORE_SUMMARY = "view_store_summary"
    VIEW_RATING_SUMMARY = "view_rating_summary"
    VIEW_DASHBOARD = "view_dashboard"


class DenyReason(str, enum.Enum):
    """거부 사유 (Why a decision denied the action)."""

    NOT_AUTHENTICATED = "not_authenticated"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class Actor:
    """인증된 행위자 (Authenticated actor: identity and role only)."""

    id: UUID
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, role=user.role)


@dataclass(frozen=True)
class ResourceContext:
    """결정에 필요한 리소스 속성.

    Resource attributes a decision may depend on.

    Attributes:
        owner_id: 매장 소유자 또는 평점 작성자 ID (Store owner id or rating author id)
        owned_store_count: 대상 사용자가 소유한 매장 수 (Stores owned by the target user)
        already_rated: 행위자가 이미 이 매장을 평가했는지 (Actor already rated the store)
    """

    owner_id: UUID | None = None
    owned_store_count: int = 0
    already_rated: bool = False


@dataclass(frozen=True)
class Decision:
    """권한 결정 결과 (Outcome of decide())."""

    allowed: bool
    reason: DenyReason | None = None
    message: str = ""

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason, message: str) -> "Decision":
        return cls(allowed=False, reason=reason, message=message)


OWNS_STORES_MESSAGE: str = "Cannot delete user who owns stores. Please reassign or delete the stores first."

_PUBLIC_ACTIONS: frozenset[Action] = frozenset({
    Action.REGISTER,
    Action.VIEW_STORES,
    Action.VIEW_STORE,
    Action.VIEW_STORE_RATINGS,
})

_SELF_ACTIONS: frozenset[Action] = frozenset({
    Action.VIEW_ME,
    Action.CHANGE_OWN_PASSWORD,
    Action.VIEW_OWN_RATINGS,
})

_ADMIN_ACTIONS: dict[Action, str] = {
    Action.ASSIGN_STORE_OWNER: "Only admins can assign store owners",
    Action.VIEW_ALL_RATINGS: "Not authorized to view all ratings",
    Action.LIST_USERS: "Not authorized to view all users",
    Action.GET_USER: "Not authorized to view user details",
    Action.CREATE_USER: "Not authorized to create users",
    Action.UPDATE_USER: "Not authorized to update users",
    Action.DELETE_USER: "Not authorized to delete users",
    Action.VIEW_USER_SUMMARY: "Not authorized to view user statistics",
    Action.VIEW_STORE_SUMMARY: "Not authorized to view store statistics",
    Action.VIEW_RATING_SUMMARY: "Not authorized to view rating statistics",
    Action.VIEW_DASHBOARD: "Not authorized to access dashboard statistics",
}

# 소유자 또는 관리자 — Owner-or-admin actions and their denial messages
_OWNER_ACTIONS: dict[Action, str] = {
    Action.UPDATE_STORE: "Not authorized to update this store",
    Action.DELETE_STORE: "Not authorized to delete this store",
    Action.VIEW_STORE_STATS: "Not authorized to access stats for this store",
    Action.UPDATE_RATING: "Not authorized to update this rating",
    Action.DELETE_RATING: "Not authorized to delete this rating",
}


def actor_of(user: User | None) -> Actor | None:
    """인증 사용자를 행위자로 변환합니다 (None for anonymous callers)."""
    return Actor.from_user(user) if user is not None else None


def resolve_registration_role(requested: str | None) -> UserRole:
    """회원가입 시 요청 역할을 결정합니다.

    Only an exact "store_owner" request is honoured; anything else, including
    "admin", silently becomes NORMAL_USER. Self-registration can never grant admin.
    """
    if requested == UserRole.STORE_OWNER.value:
        return UserRole.STORE_OWNER
    return UserRole.NORMAL_USER


def decide(
    actor: Actor | None,
    action: Action,
    resource: ResourceContext | None = None,
) -> Decision:
    """행위자가 리소스에 대해 행위를 수행할 수 있는지 결정합니다.

    Decide whether actor may perform action on resource.

    Args:
        actor: 인증된 행위자, 미인증이면 None (Authenticated actor, None if anonymous)
        action: 요청된 행위 (Requested action)
        resource: 소유권 등 리소스 속성 (Ownership attributes, if the action needs them)

    Returns:
        Decision: 허용 또는 사유가 포함된 거부 (Allow, or deny with reason and message)
    """
    ctx: ResourceContext = resource or ResourceContext()

    if action in _PUBLIC_ACTIONS:
        return Decision.allow()

    if actor is None:
        return Decision.deny(DenyReason.NOT_AUTHENTICATED, "Not authorized to access this route")

    if action in _SELF_ACTIONS:
        return Decision.allow()

    is_admin: bool = actor.role is UserRole.ADMIN

    if action in _ADMIN_ACTIONS:
        if not is_admin:
            return Decision.deny(DenyReason.FORBIDDEN, _ADMIN_ACTIONS[action])
        if action is Action.DELETE_USER and ctx.owned_store_count > 0:
            return Decision.deny(DenyReason.CONFLICT, OWNS_STORES_MESSAGE)
        return Decision.allow()

    if action in _OWNER_ACTIONS:
        if is_admin or (ctx.owner_id is not None and ctx.owner_id == actor.id):
            return Decision.allow()
        return Decision.deny(DenyReason.FORBIDDEN, _OWNER_ACTIONS[action])

    if action is Action.CREATE_STORE:
        if actor.role in (UserRole.STORE_OWNER, UserRole.ADMIN):
            return Decision.allow()
        return Decision.deny(DenyReason.FORBIDDEN, "Only store owners can create stores")

    if action is Action.VIEW_OWNED_STORES:
        if actor.role is UserRole.STORE_OWNER:
            return Decision.allow()
        return Decision.deny(DenyReason.FORBIDDEN, "Only store owners can access owned stores")

    if action is Action.CREATE_RATING:
        if actor.role is not UserRole.NORMAL_USER:
            return Decision.deny(DenyReason.FORBIDDEN, "Only normal users can rate stores")
        if ctx.already_rated:
            return Decision.deny(DenyReason.CONFLICT, "You have already rated this store")
        return Decision.allow()

    # 결정 테이블에 없는 행위는 거부 — Unlisted actions are denied
    return Decision.deny(DenyReason.FORBIDDEN, "Insufficient permissions")


def enforce(
    actor: Actor | None,
    action: Action,
    resource: ResourceContext | None = None,
) -> None:
    """decide()의 거부를 HTTP 예외로 변환합니다.

    Raise the HTTP exception matching a denial; return silently on allow.

    Raises:
        UnauthorizedError: 미인증 (NOT_AUTHENTICATED)
        ForbiddenError: 권한 부족 (FORBIDDEN)
        DuplicateError: 상태 충돌 (CONFLICT)
    """
    decision: Decision = decide(actor, action, resource)
    if decision.allowed:
        return
    if decision.reason is DenyReason.NOT_AUTHENTICATED:
        raise UnauthorizedError(decision.message)
    if decision.reason is DenyReason.CONFLICT:
        raise DuplicateError(decision.message)
    raise ForbiddenError(decision.message)
