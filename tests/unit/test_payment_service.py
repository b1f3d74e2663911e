"""
Unit tests for checkout: signatures, order creation and plan activation.
Run: pytest tests/unit/test_payment_service.py -v
"""
from decimal import Decimal

import pytest
from unittest.mock import patch
from fastapi import HTTPException

from linkfolio.core.config import settings
from linkfolio.core.errors import PaymentGatewayError
from linkfolio.core.security import compute_payment_signature, verify_payment_signature
from linkfolio.models.affiliate import Affiliate, AffiliateReferral, PromoCode
from linkfolio.models.payment import Payment
from linkfolio.models.subscription import UserSubscription
from linkfolio.repositories.affiliate_repository import AffiliateRepository
from linkfolio.repositories.payment_repository import PaymentRepository
from linkfolio.repositories.plan_repository import PlanRepository
from linkfolio.repositories.subscription_repository import SubscriptionRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.schemas.billing import CreateOrderRequest, VerifyPaymentRequest
from linkfolio.services.affiliate_service import AffiliateService, PromoCodeService
from linkfolio.services.payment_service import PaymentService, apply_discount, to_minor_units
from linkfolio.services.subscription_service import SubscriptionService

KEY_SECRET = "rzp_test_secret"


@pytest.fixture(autouse=True)
def gateway_settings(monkeypatch):
    monkeypatch.setattr(settings, "RAZORPAY_KEY_ID", "rzp_test_key")
    monkeypatch.setattr(settings, "RAZORPAY_KEY_SECRET", KEY_SECRET)


@pytest.fixture
def payments(db_session, usage):
    affiliate_repo = AffiliateRepository(db_session)
    return PaymentService(
        payments=PaymentRepository(db_session),
        plans=PlanRepository(db_session),
        subscriptions=SubscriptionService(SubscriptionRepository(db_session)),
        affiliates=AffiliateService(affiliate_repo, UserRepository(db_session)),
        promo_codes=PromoCodeService(affiliate_repo),
        usage=usage,
    )


def _verify_request(order_id, payment_id="pay_1", signature=None, plan_id="ignored"):
    return VerifyPaymentRequest(
        razorpay_order_id=order_id,
        razorpay_payment_id=payment_id,
        razorpay_signature=signature or compute_payment_signature(order_id, payment_id, KEY_SECRET),
        plan_id=plan_id,
    )


def test_signature_round_trip_and_tamper():
    signature = compute_payment_signature("order_1", "pay_1", KEY_SECRET)
    assert verify_payment_signature("order_1", "pay_1", signature, KEY_SECRET)
    assert not verify_payment_signature("order_1", "pay_2", signature, KEY_SECRET)
    assert not verify_payment_signature("order_1", "pay_1", signature, "other")
    assert not verify_payment_signature("order_1", "pay_1", "", KEY_SECRET)


def test_amount_helpers():
    assert apply_discount(Decimal("499"), 20) == Decimal("399.20")
    assert apply_discount(Decimal("100"), 100) == Decimal("0.00")
    assert to_minor_units(Decimal("399.20")) == 39920


def test_free_plan_activates_directly(payments, make_user, make_plan, usage, db_session):
    user = make_user()
    plan = make_plan("Free Plus", monthly_price=0, max_links=7)
    usage.get_limits(user.id)

    with patch("linkfolio.services.payment_service.razorpay_service.create_order") as create_order:
        result = payments.create_order(user, CreateOrderRequest(plan_id=plan.id))
    create_order.assert_not_called()

    assert result["free"] is True
    assert usage.get_limits(user.id).max_links == 7
    assert db_session.query(Payment).count() == 0


def test_paid_order_records_pending_payment(payments, make_user, make_plan, db_session):
    user = make_user()
    plan = make_plan("Pro", monthly_price=499)
    with patch(
        "linkfolio.services.payment_service.razorpay_service.create_order",
        return_value={"id": "order_abc", "amount": 49900},
    ) as create_order:
        result = payments.create_order(user, CreateOrderRequest(plan_id=plan.id))

    assert create_order.call_args.kwargs["amount"] == 49900
    assert create_order.call_args.kwargs["currency"] == "INR"
    assert result["order_id"] == "order_abc"
    assert result["key_id"] == "rzp_test_key"
    payment = db_session.query(Payment).one()
    assert payment.status == "pending"
    assert payment.razorpay_order_id == "order_abc"


def test_missing_gateway_config_is_500(payments, make_user, make_plan, monkeypatch):
    monkeypatch.setattr(settings, "RAZORPAY_KEY_SECRET", None)
    user = make_user()
    plan = make_plan("Pro", monthly_price=499)
    with pytest.raises(HTTPException) as exc:
        payments.create_order(user, CreateOrderRequest(plan_id=plan.id))
    assert exc.value.status_code == 500


def test_gateway_failure_propagates(payments, make_user, make_plan, db_session):
    user = make_user()
    plan = make_plan("Pro", monthly_price=499)
    with patch(
        "linkfolio.services.payment_service.razorpay_service.create_order",
        side_effect=PaymentGatewayError("502"),
    ):
        with pytest.raises(PaymentGatewayError):
            payments.create_order(user, CreateOrderRequest(plan_id=plan.id))
    assert db_session.query(Payment).count() == 0


def test_invalid_signature_is_400(payments, make_user):
    user = make_user()
    with pytest.raises(HTTPException) as exc:
        payments.verify(user, _verify_request("order_x", signature="deadbeef"))
    assert exc.value.status_code == 400


def _pending_payment(db_session, user, plan, amount="1000", promo=None, order_id="order_1"):
    payment = Payment(
        user_id=user.id,
        plan_id=plan.id,
        promo_code_id=promo.id if promo else None,
        amount=Decimal(amount),
        currency="INR",
        status="pending",
        billing_cycle="monthly",
        razorpay_order_id=order_id,
    )
    db_session.add(payment)
    db_session.commit()
    return payment


def test_verify_activates_everything_in_one_go(payments, make_user, make_plan, usage, db_session):
    referrer = make_user("referrer")
    buyer = make_user("buyer")
    plan = make_plan("Business", account_type="business", max_links=99)
    affiliate = Affiliate(user_id=referrer.id, referral_code="REF-REFERRER-ABC123", commission_rate=Decimal("10"))
    promo = PromoCode(code="SAVE10", discount_percent=Decimal("10"), current_uses=0)
    db_session.add_all([affiliate, promo])
    db_session.flush()
    db_session.add(AffiliateReferral(affiliate_id=affiliate.id, referred_user_id=buyer.id))
    db_session.commit()
    payment = _pending_payment(db_session, buyer, plan, amount="900", promo=promo)
    usage.get_limits(buyer.id)

    result = payments.verify(buyer, _verify_request("order_1"))
    assert result["success"] is True

    db_session.expire_all()
    assert payment.status == "success"
    assert payment.razorpay_payment_id == "pay_1"
    subscription = db_session.query(UserSubscription).filter(UserSubscription.user_id == buyer.id).one()
    assert subscription.status == "active"
    assert subscription.plan_id == plan.id
    assert buyer.account_type == "business"
    assert promo.current_uses == 1
    referral = db_session.query(AffiliateReferral).one()
    assert referral.status == "converted"
    assert Decimal(str(referral.commission_amount)) == Decimal("90.00")
    assert Decimal(str(affiliate.total_earnings)) == Decimal("90.00")
    assert usage.get_limits(buyer.id).max_links == 99


def test_verify_is_idempotent(payments, make_user, make_plan, db_session):
    user = make_user()
    plan = make_plan()
    _pending_payment(db_session, user, plan)
    payments.verify(user, _verify_request("order_1"))
    again = payments.verify(user, _verify_request("order_1"))
    assert again["message"] == "Payment already verified"
    assert db_session.query(UserSubscription).count() == 1


def test_verify_of_someone_elses_order_is_404(payments, make_user, make_plan, db_session):
    owner = make_user("owner")
    other = make_user("other")
    _pending_payment(db_session, owner, make_plan())
    with pytest.raises(HTTPException) as exc:
        payments.verify(other, _verify_request("order_1"))
    assert exc.value.status_code == 404


def test_activation_rolls_back_on_failure(payments, make_user, make_plan, db_session):
    user = make_user()
    plan = make_plan(account_type="business")
    payment = _pending_payment(db_session, user, plan)

    with patch.object(payments.affiliates, "convert_referral", side_effect=RuntimeError("boom")):
        with pytest.raises(RuntimeError):
            payments.verify(user, _verify_request("order_1"))

    db_session.expire_all()
    assert payment.status == "pending"
    assert user.account_type == "individual"
    assert db_session.query(UserSubscription).count() == 0
