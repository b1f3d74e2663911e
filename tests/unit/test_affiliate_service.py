"""
Unit tests for affiliates, referral tracking and promo codes.
Run: pytest tests/unit/test_affiliate_service.py -v
"""
import re
from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi import HTTPException

from linkfolio.core.clock import utcnow
from linkfolio.models.affiliate import AffiliateReferral, PromoCode
from linkfolio.repositories.affiliate_repository import AffiliateRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.schemas.affiliate import AffiliateUpdate, PromoCodeCreate
from linkfolio.services.affiliate_service import (
    AffiliateService,
    PromoCodeService,
    compute_commission,
    generate_referral_code,
    promo_code_rejection,
)


@pytest.fixture
def affiliates(db_session):
    return AffiliateService(AffiliateRepository(db_session), UserRepository(db_session))


@pytest.fixture
def promos(db_session):
    return PromoCodeService(AffiliateRepository(db_session))


def test_referral_code_format():
    assert re.fullmatch(r"REF-JANE_DOE-[0-9A-F]{6}", generate_referral_code("jane_doe"))


def test_commission_rounds_to_cents():
    assert compute_commission(Decimal("333.33"), Decimal("10")) == Decimal("33.33")
    assert compute_commission(999, 12.5) == Decimal("124.88")


def test_create_affiliate_once_per_user(affiliates, make_user):
    user = make_user("jane")
    created = affiliates.create(user.id, 15)
    assert created["referral_code"].startswith("REF-JANE-")
    assert created["commission_rate"] == 15.0

    with pytest.raises(HTTPException) as exc:
        affiliates.create(user.id, 15)
    assert exc.value.status_code == 400


def test_create_affiliate_for_unknown_user_is_404(affiliates):
    with pytest.raises(HTTPException) as exc:
        affiliates.create("missing", 10)
    assert exc.value.status_code == 404


def test_track_referral_rules(affiliates, make_user, db_session):
    referrer = make_user("referrer")
    newcomer = make_user("newcomer")
    code = affiliates.create(referrer.id, 10)["referral_code"]

    assert affiliates.track_referral("REF-NOBODY-000000", newcomer.id) is None
    assert affiliates.track_referral(code, referrer.id) is None
    assert affiliates.track_referral(code.lower(), newcomer.id) is not None
    assert affiliates.track_referral(code, newcomer.id) is None
    assert db_session.query(AffiliateReferral).count() == 1


def test_inactive_affiliate_code_is_ignored(affiliates, make_user):
    referrer = make_user("referrer")
    newcomer = make_user("newcomer")
    created = affiliates.create(referrer.id, 10)
    affiliates.update(created["id"], AffiliateUpdate(is_active=False))
    assert affiliates.track_referral(created["referral_code"], newcomer.id) is None


def test_payout_marks_converted_as_paid(affiliates, make_user, db_session):
    referrer = make_user("referrer")
    a = make_user("a")
    b = make_user("b")
    created = affiliates.create(referrer.id, 10)
    db_session.add_all(
        [
            AffiliateReferral(
                affiliate_id=created["id"], referred_user_id=a.id, status="converted",
                commission_amount=Decimal("50"),
            ),
            AffiliateReferral(affiliate_id=created["id"], referred_user_id=b.id, status="pending"),
        ]
    )
    db_session.commit()

    result = affiliates.payout(created["id"])
    assert result["referrals_paid"] == 1
    assert result["amount"] == 50.0

    statuses = {r["username"]: r["status"] for r in affiliates.list_referrals(created["id"])}
    assert statuses == {"a": "paid", "b": "pending"}


def test_dashboard_stats(affiliates, make_user, db_session):
    referrer = make_user("referrer")
    newcomer = make_user("newcomer")
    created = affiliates.create(referrer.id, 10)
    affiliates.track_referral(created["referral_code"], newcomer.id)

    dashboard = affiliates.dashboard(referrer.id)
    assert dashboard["stats"]["total_referrals"] == 1
    assert dashboard["stats"]["pending_referrals"] == 1

    with pytest.raises(HTTPException) as exc:
        affiliates.dashboard(newcomer.id)
    assert exc.value.status_code == 404


def test_promo_codes_are_uppercased_and_unique(promos):
    created = promos.create(PromoCodeCreate(code=" launch20 ", discount_percent=20))
    assert created.code == "LAUNCH20"
    with pytest.raises(HTTPException) as exc:
        promos.create(PromoCodeCreate(code="Launch20", discount_percent=5))
    assert exc.value.status_code == 400

    assert promos.validate("launch20") == {"valid": True, "discount_percent": 20.0, "code": "LAUNCH20"}


@pytest.mark.parametrize(
    "fields,reason",
    [
        ({"is_active": False}, "Invalid promo code"),
        ({"max_uses": 3, "current_uses": 3}, "Promo code usage limit reached"),
        ({"expires_at": utcnow() - timedelta(days=1)}, "Promo code has expired"),
    ],
)
def test_promo_rejections(fields, reason):
    values = {"code": "X", "discount_percent": Decimal("10"), "is_active": True, "current_uses": 0}
    values.update(fields)
    assert promo_code_rejection(PromoCode(**values)) == reason


def test_promo_without_limits_is_usable():
    promo = PromoCode(code="X", discount_percent=Decimal("10"), is_active=True, current_uses=50, max_uses=0)
    assert promo_code_rejection(promo) is None
    assert promo_code_rejection(None) == "Invalid promo code"


def test_validate_unknown_code_is_400(promos):
    with pytest.raises(HTTPException) as exc:
        promos.validate("NOPE")
    assert exc.value.status_code == 400
