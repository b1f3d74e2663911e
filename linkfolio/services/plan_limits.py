"""
Plan limits: usage snapshot per user and the gate that metered creates go through.

Every create of a link, page, block, social or team member runs in this order:
fetch the snapshot, check the action gate, insert, invalidate the snapshot.
The gate is advisory. Two concurrent creates from the same user can both read
``current == max - 1`` and both succeed, ending one over the limit. That race
is accepted; shrinking a plan never deletes existing rows either.
"""
import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from linkfolio.core.cache import InMemoryTTLCache, KeyValueCache, RedisTTLCache
from linkfolio.core.config import settings
from linkfolio.core.errors import PlanLimitExceeded
from linkfolio.repositories.usage_repository import UsageRepository

logger = logging.getLogger(__name__)

# Snapshots may be up to this many seconds stale. Writers invalidate the entry
# after inserts/deletes, so the window only matters across API instances
# (each instance has its own in-memory cache) and for concurrent requests.
USAGE_CACHE_TTL_SECONDS = 5

FREE_LIMITS = {
    "max_links": 5,
    "max_pages": 1,
    "max_team_members": 1,
    "max_blocks": 10,
    "max_socials": 3,
    "qr_code_enabled": False,
    "analytics_enabled": False,
    "custom_templates_enabled": False,
    "menu_builder_enabled": False,
}


class Action(str, Enum):
    ADD_LINK = "add_link"
    ADD_PAGE = "add_page"
    ADD_BLOCK = "add_block"
    ADD_SOCIAL = "add_social"
    ADD_TEAM_MEMBER = "add_team_member"


# action -> (resource suffix on the snapshot, label used in messages)
_ACTION_RESOURCES = {
    Action.ADD_LINK: ("links", "links"),
    Action.ADD_PAGE: ("pages", "pages"),
    Action.ADD_BLOCK: ("blocks", "blocks"),
    Action.ADD_SOCIAL: ("socials", "social links"),
    Action.ADD_TEAM_MEMBER: ("team_members", "team members"),
}


@dataclass(frozen=True)
class TeamMembership:
    """Result of resolving a user's team: a member of one, of none, or unknown."""

    state: str
    team_id: Optional[str] = None

    MEMBER = "member"
    NONE = "none"
    LOOKUP_FAILED = "lookup_failed"

    @classmethod
    def member(cls, team_id: str) -> "TeamMembership":
        return cls(cls.MEMBER, team_id)

    @classmethod
    def none(cls) -> "TeamMembership":
        return cls(cls.NONE)

    @classmethod
    def lookup_failed(cls) -> "TeamMembership":
        return cls(cls.LOOKUP_FAILED)


@dataclass
class UsageSnapshot:
    plan_name: Optional[str]
    max_links: int
    max_pages: int
    max_team_members: int
    max_blocks: int
    max_socials: int
    qr_code_enabled: bool
    analytics_enabled: bool
    custom_templates_enabled: bool
    menu_builder_enabled: bool
    current_links: int
    current_pages: int
    current_blocks: int
    current_socials: int
    current_team_members: int
    has_active_plan: bool
    team_lookup_failed: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ActionCheck:
    allowed: bool
    message: Optional[str] = None


def can_perform_action(snapshot: UsageSnapshot, action: Action) -> ActionCheck:
    """Deny when the resource is already at capacity (``current >= max``)."""
    resource, label = _ACTION_RESOURCES[Action(action)]
    maximum = getattr(snapshot, f"max_{resource}")
    current = getattr(snapshot, f"current_{resource}")
    if current >= maximum:
        plan = snapshot.plan_name or "Free"
        return ActionCheck(
            allowed=False,
            message=(
                f"You've reached the limit of {maximum} {label} on the {plan} plan. "
                f"Upgrade your plan to add more."
            ),
        )
    return ActionCheck(allowed=True)


def _plan_value(plan, field: str):
    value = getattr(plan, field, None) if plan is not None else None
    return FREE_LIMITS[field] if value is None else value


class UsageService:
    def __init__(self, repo: UsageRepository, cache: KeyValueCache):
        self.repo = repo
        self.cache = cache

    @staticmethod
    def _cache_key(user_id: str) -> str:
        return str(user_id)

    def resolve_team(self, user_id: str) -> TeamMembership:
        try:
            team_id = self.repo.get_team_id(user_id)
        except SQLAlchemyError as e:
            logger.warning(f"Team lookup failed for user {user_id}: {str(e)}")
            self.repo.db.rollback()
            return TeamMembership.lookup_failed()
        if team_id is None:
            return TeamMembership.none()
        return TeamMembership.member(team_id)

    def _count_team_members(self, membership: TeamMembership) -> int:
        if membership.state != TeamMembership.MEMBER:
            return 0
        return self.repo.count_team_members(membership.team_id)

    def compute(self, user_id: str) -> UsageSnapshot:
        plan = self.repo.get_active_plan(user_id)
        profile_socials, menu_socials = self.repo.count_socials(user_id)
        membership = self.resolve_team(user_id)

        return UsageSnapshot(
            plan_name=plan.name if plan is not None else None,
            max_links=_plan_value(plan, "max_links"),
            max_pages=_plan_value(plan, "max_pages"),
            max_team_members=_plan_value(plan, "max_team_members"),
            max_blocks=_plan_value(plan, "max_blocks"),
            max_socials=_plan_value(plan, "max_socials"),
            qr_code_enabled=bool(_plan_value(plan, "qr_code_enabled")),
            analytics_enabled=bool(_plan_value(plan, "analytics_enabled")),
            custom_templates_enabled=bool(_plan_value(plan, "custom_templates_enabled")),
            menu_builder_enabled=bool(_plan_value(plan, "menu_builder_enabled")),
            current_links=self.repo.count_links(user_id),
            current_pages=self.repo.count_pages(user_id),
            current_blocks=self.repo.count_blocks(user_id),
            current_socials=profile_socials + menu_socials,
            current_team_members=self._count_team_members(membership),
            has_active_plan=plan is not None,
            team_lookup_failed=membership.state == TeamMembership.LOOKUP_FAILED,
        )

    def get_limits(self, user_id: str) -> UsageSnapshot:
        cached = self.cache.get(self._cache_key(user_id))
        if cached is not None:
            return UsageSnapshot(**cached)
        snapshot = self.compute(user_id)
        self.cache.set(self._cache_key(user_id), snapshot.to_dict())
        return snapshot

    def invalidate(self, user_id: str) -> None:
        self.cache.invalidate(self._cache_key(user_id))

    def ensure_allowed(self, user_id: str, action: Action) -> UsageSnapshot:
        snapshot = self.get_limits(user_id)
        check = can_perform_action(snapshot, action)
        if not check.allowed:
            logger.info(f"Action {Action(action).value} denied for user {user_id}: limit reached")
            raise PlanLimitExceeded(check.message)
        return snapshot


_usage_cache: Optional[KeyValueCache] = None


def get_usage_cache() -> KeyValueCache:
    """Process-wide snapshot cache; FastAPI dependency, overridable in tests."""
    global _usage_cache
    if _usage_cache is None:
        if settings.USAGE_CACHE_BACKEND == "redis" and settings.REDIS_URL:
            _usage_cache = RedisTTLCache(USAGE_CACHE_TTL_SECONDS, prefix="usage")
        else:
            _usage_cache = InMemoryTTLCache(USAGE_CACHE_TTL_SECONDS)
    return _usage_cache
