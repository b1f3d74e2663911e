import os

# Settings() is built at import time; point it at SQLite before any linkfolio import.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["USAGE_CACHE_BACKEND"] = "memory"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import linkfolio.models  # noqa: F401
from linkfolio.core.cache import InMemoryTTLCache
from linkfolio.core.security import create_access_token, get_password_hash
from linkfolio.db.base import Base
from linkfolio.models.plan import PricingPlan
from linkfolio.models.subscription import UserSubscription, STATUS_ACTIVE
from linkfolio.models.user import User
from linkfolio.repositories.usage_repository import UsageRepository
from linkfolio.services.plan_limits import USAGE_CACHE_TTL_SECONDS, UsageService


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def usage_cache(clock):
    return InMemoryTTLCache(USAGE_CACHE_TTL_SECONDS, clock=clock)


@pytest.fixture
def usage(db_session, usage_cache):
    return UsageService(UsageRepository(db_session), usage_cache)


@pytest.fixture
def make_user(db_session):
    def _make_user(username: str = "alice", password: str = "secret123", **fields) -> User:
        user = User(
            username=username,
            email=fields.pop("email", f"{username}@example.com"),
            hashed_password=get_password_hash(password),
            display_name=fields.pop("display_name", username.title()),
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_plan(db_session):
    def _make_plan(name: str = "Pro", **fields) -> PricingPlan:
        defaults = {
            "monthly_price": 499,
            "yearly_price": 4990,
            "max_links": 50,
            "max_pages": 10,
            "max_team_members": 5,
            "max_blocks": 100,
            "max_socials": 20,
            "qr_code_enabled": True,
            "analytics_enabled": True,
            "custom_templates_enabled": True,
            "menu_builder_enabled": True,
            "account_type": "individual",
            "is_active": True,
            "sort_order": 1,
        }
        defaults.update(fields)
        plan = PricingPlan(name=name, **defaults)
        db_session.add(plan)
        db_session.commit()
        db_session.refresh(plan)
        return plan

    return _make_plan


@pytest.fixture
def subscribe(db_session):
    def _subscribe(user: User, plan: PricingPlan, status: str = STATUS_ACTIVE) -> UserSubscription:
        subscription = UserSubscription(user_id=user.id, plan_id=plan.id, status=status, billing_cycle="monthly")
        db_session.add(subscription)
        db_session.commit()
        return subscription

    return _subscribe


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}

    return _auth_headers


@pytest.fixture
def client(db_session, usage_cache):
    from linkfolio.db.session import get_db
    from linkfolio.main import app
    from linkfolio.services.plan_limits import get_usage_cache

    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_usage_cache] = lambda: usage_cache
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
